"""Orchestrates a release run: version when changesets are pending, publish otherwise."""

import time

import structlog

from changeset_release.changesets.state import read_changeset_state
from changeset_release.configuration.environment import prepare_environment
from changeset_release.configuration.models import ActionConfig
from changeset_release.configuration.reconcile import validate_npm_token
from changeset_release.git.repository import GitRepository
from changeset_release.github.abc import GitHubClientBase
from changeset_release.github.adapter import GitHubKitAdapter
from changeset_release.synchronize.outputs import ActionOutputs
from changeset_release.synchronize.publish import run_publish_workflow
from changeset_release.synchronize.results import PublishResult, VersionWorkflowResult
from changeset_release.synchronize.version import run_version_workflow

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_release_action(
    config: ActionConfig,
    github_adapter: GitHubClientBase,
    git: GitRepository,
    outputs: ActionOutputs,
) -> VersionWorkflowResult | PublishResult | None:
    """Decide between the version and publish workflows and run the chosen one.

    The outputs start as published=false and an empty package list; only a
    publish run that actually published something overwrites them.

    Returns:
        The result of the workflow that ran, or None if neither ran.
    """
    changeset_state = await read_changeset_state(config.context.cwd)
    has_changesets = changeset_state.has_changesets

    outputs.set("published", "false")
    outputs.set("publishedPackages", "[]")
    outputs.set("hasChangesets", str(has_changesets).lower())

    if has_changesets:
        start_time = time.time()
        result = await run_version_workflow(config, github_adapter, git)
        logger.info(
            "Version workflow finished",
            pr_number=result.pull_request_number,
            created=result.created,
            duration=round(time.time() - start_time, 2),
        )
        return result

    logger.info("No changesets found")
    if not config.auto_publish:
        return None

    npm_token = validate_npm_token(config)
    logger.info("Attempting to publish any unpublished packages to npm")
    start_time = time.time()
    publish_result = await run_publish_workflow(config, npm_token, github_adapter)
    logger.info(
        "Publish workflow finished",
        published=publish_result.published,
        package_count=len(publish_result.published_packages),
        duration=round(time.time() - start_time, 2),
    )
    if publish_result.published:
        outputs.set("published", "true")
        outputs.set("publishedPackages", publish_result.published_packages_json())
    return publish_result


async def run_changeset_release_workflow(config: ActionConfig) -> VersionWorkflowResult | PublishResult | None:
    """Set up the git environment and the GitHub adapter, then run the release action."""
    git = GitRepository(config.context.cwd)
    await prepare_environment(config, git)

    github_adapter = await GitHubKitAdapter.create(
        repo=config.context.repo,
        github_token=config.github_token,
        github_api_url=config.github_api_url,
    )
    outputs = ActionOutputs(config.output_path)
    return await run_release_action(config, github_adapter, git, outputs)
