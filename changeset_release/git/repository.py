"""Git commands used to rebuild and push the release branch."""

from pathlib import Path

import structlog

from changeset_release.utils.constants import GIT_USER_EMAIL, GIT_USER_NAME
from changeset_release.utils.process import ProcessResult, run_command

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitRepository:
    """Small set of git primitives operating on a local working tree.

    Every command raises ProcessExecutionError on a non-zero exit unless noted
    otherwise.
    """

    def __init__(self, cwd: Path) -> None:
        """Initialize the repository wrapper for the given working tree."""
        self.cwd = cwd

    async def _git(self, *args: str, check: bool = True) -> ProcessResult:
        return await run_command("git", *args, cwd=self.cwd, check=check)

    async def setup_user(self, name: str = GIT_USER_NAME, email: str = GIT_USER_EMAIL) -> None:
        """Configure the committer identity used for the version bump commit."""
        logger.info("Setting git user", name=name, email=email)
        await self._git("config", "user.name", name)
        await self._git("config", "user.email", email)

    async def switch_to_maybe_existing_branch(self, branch: str) -> None:
        """Check out a branch, creating it from the current commit if it does not exist.

        `git checkout <branch>` succeeds for local branches and creates a tracking
        branch when only the remote one exists; otherwise a new branch is created.
        """
        result = await self._git("checkout", branch, check=False)
        if result.returncode == 0:
            logger.info("Switched to existing branch", branch=branch)
            return
        logger.info("Branch does not exist yet, creating it", branch=branch)
        await self._git("checkout", "-b", branch)

    async def reset(self, ref: str, mode: str = "hard") -> None:
        """Reset the current branch to the given commit."""
        logger.info("Resetting branch", ref=ref, mode=mode)
        await self._git("reset", f"--{mode}", ref)

    async def check_if_clean(self) -> bool:
        """Return True if the working tree has no uncommitted changes."""
        result = await self._git("status", "--porcelain")
        return not result.output.strip()

    async def commit_all(self, message: str) -> None:
        """Stage and commit every change in the working tree."""
        logger.info("Committing all changes", message=message)
        await self._git("add", ".")
        await self._git("commit", "-m", message)

    async def push(self, branch: str, force: bool = False) -> None:
        """Push the current HEAD to the given remote branch."""
        args = ["push", "origin", f"HEAD:{branch}"]
        if force:
            args.append("--force")
        logger.info("Pushing branch", branch=branch, force=force)
        await self._git(*args)
