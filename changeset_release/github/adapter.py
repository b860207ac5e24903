"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import PullRequest, PullRequestSimple, Release

from changeset_release.utils.github import split_repository_in_configuration

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_token_client

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

PAGE_SIZE = 100


def handle_github_422(func: F) -> F:
    """Decorator turning GitHub 422 Unprocessable Entity errors into a ValueError carrying the API's explanation."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            url = getattr(exc.response, "url", None)
            logger.error("GitHub 422 Unprocessable Entity", function=func.__name__, message=message, errors=errors, url=url)
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors} | url: {url}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """Pull request and release operations on one repository, backed by githubkit."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the adapter with an already-authenticated client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(cls, repo: str, github_token: str, github_api_url: str = "https://api.github.com") -> Self:
        """Create an adapter for a repository.

        Args:
            repo: Repository in 'owner/repo' format (GITHUB_REPOSITORY)
            github_token: Token of the workflow run (GITHUB_TOKEN)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info("Creating client for GitHub instance and repository", github_api_url=github_api_url, owner=owner, repo_name=repo_name)
        client = await get_github_token_client(github_token=github_token, github_api_url=github_api_url)
        return cls(client, owner, repo_name)

    # Pull Requests
    async def list_pull_requests(self, state: str = "open", per_page: int = PAGE_SIZE, **filters: Any) -> list[PullRequestSimple]:
        """List pull requests matching the filters, following pagination until a short page."""
        pull_requests: list[PullRequestSimple] = []
        page = 1
        while True:
            response: Response[list[PullRequestSimple]] = await self.client.rest.pulls.async_list(
                owner=self.owner,
                repo=self.repo_name,
                state=state,
                per_page=per_page,
                page=page,
                **filters,
            )
            page_items = response.parsed_data
            pull_requests.extend(page_items)
            if len(page_items) < per_page:
                return pull_requests
            page += 1

    async def find_open_pull_requests(self, head: str, base: str) -> list[PullRequestSimple]:
        """Find open pull requests from a branch of this repository into the base branch.

        GitHub only filters by head when it is qualified with the owner of the
        repository the branch lives in.
        """
        pull_requests = await self.list_pull_requests(state="open", head=f"{self.owner}:{head}", base=base)
        logger.debug("Searched for open pull requests", head=head, base=base, found=[pr.number for pr in pull_requests])
        return pull_requests

    @handle_github_422
    async def create_pull_request(self, title: str, head: str, base: str, body: str) -> PullRequest:
        """Open a pull request from head into base."""
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=self.repo_name,
            title=title,
            head=head,
            base=base,
            body=body,
        )
        logger.info("Created pull request", pr_number=response.parsed_data.number, head=head, base=base)
        return response.parsed_data

    @handle_github_422
    async def update_pull_request(self, pull_number: int, title: str, body: str) -> PullRequest:
        """Replace the title and body of an existing pull request."""
        response: Response[PullRequest] = await self.client.rest.pulls.async_update(
            owner=self.owner,
            repo=self.repo_name,
            pull_number=pull_number,
            title=title,
            body=body,
        )
        logger.info("Updated pull request", pr_number=pull_number)
        return response.parsed_data

    # Releases
    @handle_github_422
    async def create_release(self, tag_name: str, name: str, body: str, prerelease: bool = False) -> Release:
        """Create a release; GitHub creates the tag if it does not exist."""
        response: Response[Release] = await self.client.rest.repos.async_create_release(
            owner=self.owner,
            repo=self.repo_name,
            tag_name=tag_name,
            name=name,
            body=body,
            prerelease=prerelease,
        )
        logger.info("Created release", tag_name=tag_name, prerelease=prerelease)
        return response.parsed_data
