"""Contains the workflow that opens or refreshes the release pull request."""

import asyncio
import shlex
from pathlib import Path

import structlog
from structlog.contextvars import bound_contextvars

from changeset_release.changesets.models import PreState
from changeset_release.changesets.state import read_changeset_state
from changeset_release.configuration.models import ActionConfig, ReleaseContext
from changeset_release.git.repository import GitRepository
from changeset_release.github.abc import GitHubClientBase
from changeset_release.release_notes.extractor import get_changelog_entry
from changeset_release.release_notes.models import PackageReleaseNotes, ReleaseSection, VersionPullRequestBody
from changeset_release.release_notes.ordering import sort_release_notes
from changeset_release.synchronize.exceptions import MissingChangelogEntryError
from changeset_release.synchronize.results import VersionWorkflowResult
from changeset_release.utils.constants import CHANGELOG_FILENAME, LOCKFILE_DEDUPE_COMMAND, LOCKFILE_UPDATE_COMMANDS
from changeset_release.utils.process import run_command
from changeset_release.utils.templates import get_packaged_template, render_template_with_model
from changeset_release.workspace.packages import Package, discover_packages, get_changed_packages, get_versions_by_directory

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

PULL_REQUEST_BODY_TEMPLATE = "version_pr_body.j2"


def pre_state_suffix(pre_state: PreState | None) -> str:
    """Suffix appended to the PR title and commit message while in pre mode."""
    return f" ({pre_state.tag})" if pre_state is not None else ""


async def run_version_command(version_command: str, cwd: Path) -> None:
    """Run the external version-bump tool in the workspace root."""
    command = shlex.split(version_command)
    if not command:
        raise ValueError("The version command must not be empty")
    logger.info("Running version command", command=version_command)
    await run_command(command[0], *command[1:], cwd=cwd)


async def update_lockfile(cwd: Path, dedupe: bool = False) -> None:
    """Regenerate the lock file for the bumped manifests, optionally deduplicating it."""
    logger.info("Updating lock file", dedupe=dedupe)
    for command in LOCKFILE_UPDATE_COMMANDS:
        await run_command(*command, cwd=cwd)
    if dedupe:
        await run_command(*LOCKFILE_DEDUPE_COMMAND, cwd=cwd)


async def read_package_release_notes(package: Package, require_entry: bool = True) -> PackageReleaseNotes | None:
    """Read a changed package's changelog and extract the entry for its new version.

    Raises:
        MissingChangelogEntryError: If the changelog or the entry is missing and require_entry is set.
    """
    changelog_path = package.directory / CHANGELOG_FILENAME
    try:
        changelog = await asyncio.to_thread(changelog_path.read_text, encoding="utf-8")
    except FileNotFoundError as exc:
        if require_entry:
            raise MissingChangelogEntryError(package.name, package.version, reason=f"{changelog_path} not found") from exc
        logger.warning("Changed package has no changelog, leaving it out of the PR body", package=package.release_identity)
        return None

    entry = get_changelog_entry(changelog, package.version)
    if entry is None:
        if require_entry:
            raise MissingChangelogEntryError(package.name, package.version)
        logger.warning("Changed package has no changelog entry, leaving it out of the PR body", package=package.release_identity)
        return None
    return PackageReleaseNotes(name=package.name, version=package.version, is_private=package.is_private, entry=entry)


async def collect_release_notes(changed_packages: list[Package], require_entries: bool = True) -> list[PackageReleaseNotes]:
    """Read the release notes of all changed packages concurrently."""
    results = await asyncio.gather(*(read_package_release_notes(package, require_entries) for package in changed_packages))
    return [notes for notes in results if notes is not None]


def build_pull_request_body(branch: str, auto_publish: bool, pre_state: PreState | None, release_notes: list[PackageReleaseNotes]) -> str:
    """Render the release pull request body with its sections in presentation order."""
    model = VersionPullRequestBody(
        branch=branch,
        auto_publish=auto_publish,
        pre_state_tag=pre_state.tag if pre_state is not None else None,
        sections=[ReleaseSection(heading=notes.release_identity, content=notes.entry.content) for notes in sort_release_notes(release_notes)],
    )
    return render_template_with_model(model, get_packaged_template(PULL_REQUEST_BODY_TEMPLATE))


async def sync_release_pull_request(
    github_adapter: GitHubClientBase,
    context: ReleaseContext,
    title: str,
    body: str,
) -> tuple[int, bool]:
    """Create the release pull request, or update it in place if one is already open.

    Returns:
        Tuple of (pull request number, whether it was created).
    """
    existing_pull_requests = await github_adapter.find_open_pull_requests(head=context.release_branch, base=context.branch)
    if not existing_pull_requests:
        logger.info("Creating release pull request", head=context.release_branch, base=context.branch)
        pull_request = await github_adapter.create_pull_request(title=title, head=context.release_branch, base=context.branch, body=body)
        return pull_request.number, True

    pull_request_number = existing_pull_requests[0].number
    logger.info("Release pull request found, updating it", pr_number=pull_request_number)
    await github_adapter.update_pull_request(pull_number=pull_request_number, title=title, body=body)
    return pull_request_number, False


async def run_version_workflow(config: ActionConfig, github_adapter: GitHubClientBase, git: GitRepository) -> VersionWorkflowResult:
    """Run the version workflow: bump versions on the release branch and open or refresh its pull request.

    Every step either succeeds or raises; nothing is retried. A failed run can
    leave the release branch half-built, which the next run overwrites by
    resetting it to its own triggering commit.
    """
    context = config.context
    with bound_contextvars(release_branch=context.release_branch, sha=context.sha):
        changeset_state = await read_changeset_state(context.cwd)
        pre_state = changeset_state.pre_state

        await git.switch_to_maybe_existing_branch(context.release_branch)
        await git.reset(context.sha)

        versions_before = get_versions_by_directory(context.cwd)

        await run_version_command(config.version_command, context.cwd)
        await update_lockfile(context.cwd, dedupe=config.dedupe)

        workspace = discover_packages(context.cwd)
        changed_packages = get_changed_packages(versions_before, workspace.packages)
        release_notes = await collect_release_notes(changed_packages, config.require_changelog_entries)
        body = build_pull_request_body(context.branch, config.auto_publish, pre_state, release_notes)
        title = f"{config.pr_title}{pre_state_suffix(pre_state)}"

        # The version tool may have committed its changes already.
        if not await git.check_if_clean():
            await git.commit_all(f"{config.commit_message}{pre_state_suffix(pre_state)}")
        await git.push(context.release_branch, force=True)

        pull_request_number, created = await sync_release_pull_request(github_adapter, context, title, body)
        return VersionWorkflowResult(pull_request_number=pull_request_number, created=created, changed_packages=changed_packages)
