"""Contains the workflow that publishes packages and creates their GitHub releases."""

import asyncio

import structlog

from changeset_release.configuration.models import ActionConfig
from changeset_release.github.abc import GitHubClientBase
from changeset_release.publish.detector import PublishResultDetector, YarnPublishDetector, resolve_published_packages
from changeset_release.release_notes.extractor import get_changelog_entry
from changeset_release.synchronize.exceptions import MissingChangelogEntryError
from changeset_release.synchronize.results import PublishedPackage, PublishResult
from changeset_release.utils.constants import CHANGELOG_FILENAME, PUBLISH_COMMAND
from changeset_release.utils.process import run_command
from changeset_release.workspace.packages import Package, discover_packages

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def create_release(github_adapter: GitHubClientBase, package: Package) -> bool:
    """Create the GitHub release for a freshly published package.

    A package without a CHANGELOG.md has changelogs disabled and gets no
    release. A changelog without an entry for the published version means the
    version tool and this workflow disagree, which is fatal.

    Returns:
        Whether a release was created.
    """
    changelog_path = package.directory / CHANGELOG_FILENAME
    try:
        changelog = await asyncio.to_thread(changelog_path.read_text, encoding="utf-8")
    except FileNotFoundError:
        logger.info("No changelog found, skipping release", package=package.release_identity)
        return False

    entry = get_changelog_entry(changelog, package.version)
    if entry is None:
        raise MissingChangelogEntryError(package.name, package.version)

    await github_adapter.create_release(
        tag_name=package.release_identity,
        name=package.release_identity,
        body=entry.content,
        prerelease="-" in package.version,
    )
    return True


async def run_publish_workflow(
    config: ActionConfig,
    npm_token: str,
    github_adapter: GitHubClientBase,
    detector: PublishResultDetector | None = None,
) -> PublishResult:
    """Run the publish workflow: publish unpublished packages and cut a GitHub release for each.

    Args:
        config: Configuration of this run.
        npm_token: Registry token written into the yarn configuration.
        github_adapter: Client used to create the releases.
        detector: Strategy reading published packages from the publish output.

    Returns:
        PublishResult listing the packages published by this run.
    """
    cwd = config.context.cwd
    detector = detector or YarnPublishDetector()

    logger.info("Configuring registry authentication")
    await run_command("yarn", "config", "set", "npmAuthToken", npm_token, cwd=cwd, secrets=[npm_token])

    logger.info("Publishing unpublished packages", command=" ".join(PUBLISH_COMMAND))
    publish_result = await run_command(*PUBLISH_COMMAND, cwd=cwd)

    workspace = discover_packages(cwd)
    published_packages = resolve_published_packages(detector.detect(publish_result.output), workspace)
    logger.info("Detected published packages", packages=[package.release_identity for package in published_packages])

    await asyncio.gather(*(create_release(github_adapter, package) for package in published_packages))

    if not published_packages:
        return PublishResult(published=False)
    return PublishResult(
        published=True,
        published_packages=[PublishedPackage(name=package.name, version=package.version) for package in published_packages],
    )
