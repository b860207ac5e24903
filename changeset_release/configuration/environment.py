"""Prepares the process-wide git environment before any workflow runs."""

import structlog

from changeset_release.configuration.models import ActionConfig
from changeset_release.git.repository import GitRepository

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def netrc_content(github_token: str, machine: str = "github.com") -> str:
    """Build a .netrc entry authenticating git HTTPS pushes with the GitHub token."""
    return f"machine {machine}\nlogin github-actions[bot]\npassword {github_token}"


async def prepare_environment(config: ActionConfig, git: GitRepository) -> None:
    """Configure the committer identity and the git credentials for this run."""
    await git.setup_user()

    netrc_path = config.home / ".netrc"
    logger.info("Setting GitHub credentials", netrc_path=str(netrc_path))
    netrc_path.write_text(netrc_content(config.github_token), encoding="utf-8")
