"""Reconcile configuration between CLI arguments and environment variables."""

from pathlib import Path

import structlog

from changeset_release.configuration.env import Settings
from changeset_release.configuration.exceptions import RequiredConfigurationElementError
from changeset_release.configuration.models import ActionConfig, ReleaseContext
from changeset_release.utils.constants import DEFAULT_COMMIT_MESSAGE, DEFAULT_PR_TITLE, DEFAULT_VERSION_COMMAND
from changeset_release.utils.github import branch_name_from_ref

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def require_setting(value: str | None, name: str, env_name: str, cli_name: str | None = None) -> str:
    """Return a configuration value, raising if it is missing or empty."""
    if not value:
        raise RequiredConfigurationElementError(name=name, cli_name=cli_name, env_name=env_name)
    return value


async def reconcile_action_configuration(
    settings: Settings,
    cli_debug: bool = False,
    cli_version_command: str | None = None,
    cli_pr_title: str | None = None,
    cli_commit_message: str | None = None,
    cli_auto_publish: bool = False,
    cli_dedupe: bool = False,
    cli_cwd: Path | None = None,
    cli_require_changelog_entries: bool = True,
) -> ActionConfig:
    """Reconciles CLI inputs with environment settings into a validated configuration.

    Args:
        settings: Environment settings.
        cli_debug: Enable debug logging.
        cli_version_command: Invocation of the version-bump tool.
        cli_pr_title: Title of the release pull request.
        cli_commit_message: Message of the version bump commit.
        cli_auto_publish: Publish packages when no changesets are pending.
        cli_dedupe: Deduplicate the lock file after updating it.
        cli_cwd: Working directory override.
        cli_require_changelog_entries: Fail when a changed package has no changelog entry.

    Raises:
        RequiredConfigurationElementError: If a required credential or run context value is missing.

    Returns:
        ActionConfig: The reconciled configuration.
    """
    github_token = require_setting(settings.GITHUB_TOKEN, "GitHub token", "GITHUB_TOKEN")
    repo = require_setting(settings.GITHUB_REPOSITORY, "GitHub repository", "GITHUB_REPOSITORY")
    ref = require_setting(settings.GITHUB_REF, "Triggering git ref", "GITHUB_REF")
    sha = require_setting(settings.GITHUB_SHA, "Triggering commit SHA", "GITHUB_SHA")

    cwd = (cli_cwd or Path.cwd()).resolve()
    context = ReleaseContext(repo=repo, branch=branch_name_from_ref(ref), sha=sha, cwd=cwd)
    logger.debug("Reconciled release context", repo=repo, branch=context.branch, sha=sha, cwd=str(cwd))

    return ActionConfig(
        debug=cli_debug or settings.DEBUG,
        github_api_url=settings.GITHUB_API_URL,
        github_token=github_token,
        npm_token=settings.NPM_TOKEN,
        home=settings.HOME,
        output_path=settings.GITHUB_OUTPUT,
        context=context,
        version_command=cli_version_command or DEFAULT_VERSION_COMMAND,
        pr_title=cli_pr_title or DEFAULT_PR_TITLE,
        commit_message=cli_commit_message or DEFAULT_COMMIT_MESSAGE,
        auto_publish=cli_auto_publish,
        dedupe=cli_dedupe,
        require_changelog_entries=cli_require_changelog_entries,
    )


def validate_npm_token(config: ActionConfig) -> str:
    """Return the registry token needed for publishing.

    Raises:
        RequiredConfigurationElementError: If NPM_TOKEN is not set.
    """
    return require_setting(config.npm_token, "npm registry token", "NPM_TOKEN")
