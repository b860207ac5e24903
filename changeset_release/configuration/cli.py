"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
import sys
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from changeset_release.configuration.env import Settings
from changeset_release.configuration.reconcile import reconcile_action_configuration
from changeset_release.synchronize.driver import run_changeset_release_workflow
from changeset_release.synchronize.results import PublishResult, VersionWorkflowResult
from changeset_release.utils.constants import DEFAULT_COMMIT_MESSAGE, DEFAULT_PR_TITLE, DEFAULT_VERSION_COMMAND

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Version and publish a yarn workspace from pending changesets.")


def configure_logging(debug: bool) -> None:
    """Configure structlog to render key/value events at INFO, or DEBUG when requested."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        cache_logger_on_first_use=True,
    )


@typer_app.callback()
def main() -> None:
    """Version and publish a yarn workspace from pending changesets."""


@typer_app.command(name="run")
def run_cli(
    version_command: Annotated[
        str, Option("--version-command", envvar="INPUT_VERSION", help="Command that bumps versions and writes changelogs.")
    ] = DEFAULT_VERSION_COMMAND,
    title: Annotated[str, Option("--title", envvar="INPUT_TITLE", help="Title of the release pull request.")] = DEFAULT_PR_TITLE,
    commit: Annotated[str, Option("--commit", envvar="INPUT_COMMIT", help="Message of the version bump commit.")] = DEFAULT_COMMIT_MESSAGE,
    auto_publish: Annotated[
        bool, Option("--auto-publish/--no-auto-publish", envvar="INPUT_AUTOPUBLISH", help="Publish packages when no changesets are pending.")
    ] = False,
    dedupe: Annotated[bool, Option("--dedupe/--no-dedupe", envvar="INPUT_DEDUPE", help="Deduplicate the lock file after updating it.")] = False,
    cwd: Annotated[Path | None, Option("--cwd", envvar="INPUT_CWD", help="Workspace root; defaults to the current directory.")] = None,
    require_changelog_entries: Annotated[
        bool,
        Option(
            "--require-changelog-entries/--allow-missing-changelog-entries",
            envvar="INPUT_REQUIRECHANGELOGENTRIES",
            help="Fail when a versioned package has no changelog entry for its new version.",
        ),
    ] = True,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Open or update the release pull request, or publish once it has been merged."""
    configure_logging(debug)

    try:
        config = asyncio.run(
            reconcile_action_configuration(
                Settings(),
                cli_debug=debug,
                cli_version_command=version_command,
                cli_pr_title=title,
                cli_commit_message=commit,
                cli_auto_publish=auto_publish,
                cli_dedupe=dedupe,
                cli_cwd=cwd,
                cli_require_changelog_entries=require_changelog_entries,
            )
        )
        result = asyncio.run(run_changeset_release_workflow(config))
    except Exception as exc:
        typer.echo(f"::error::{exc}", err=True)
        sys.exit(1)

    if isinstance(result, VersionWorkflowResult):
        action = "Created" if result.created else "Updated"
        typer.echo(f"{action} release pull request #{result.pull_request_number} for {len(result.changed_packages)} package(s)")
    elif isinstance(result, PublishResult):
        if result.published:
            typer.echo("Published " + ", ".join(f"{p.name}@{p.version}" for p in result.published_packages))
        else:
            typer.echo("No unpublished packages found")


if __name__ == "__main__":
    typer_app()
