"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from pathlib import Path

from changeset_release.utils.constants import RELEASE_BRANCH_PREFIX


@dataclass
class ReleaseContext:
    """Where the run happens: repository, triggering branch and commit."""

    repo: str
    branch: str
    sha: str
    cwd: Path

    @property
    def release_branch(self) -> str:
        """The long-lived branch holding the unmerged version bump."""
        return f"{RELEASE_BRANCH_PREFIX}{self.branch}"


@dataclass
class ActionConfig:
    """Configuration class for a single release action run."""

    debug: bool
    github_api_url: str
    github_token: str
    npm_token: str | None
    home: Path
    output_path: Path | None
    context: ReleaseContext
    version_command: str
    pr_title: str
    commit_message: str
    auto_publish: bool
    dedupe: bool
    require_changelog_entries: bool
