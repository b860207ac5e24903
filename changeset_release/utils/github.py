"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("GITHUB_REPOSITORY must be set to an 'owner/repo' value.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def branch_name_from_ref(ref: str) -> str:
    """Strip the 'refs/heads/' prefix from a git ref, returning the branch name."""
    return ref.removeprefix("refs/heads/")
