"""Unit tests for the command line interface."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from pytest import MonkeyPatch
from typer.testing import CliRunner

from changeset_release.configuration.cli import typer_app
from changeset_release.synchronize.results import PublishedPackage, PublishResult, VersionWorkflowResult

runner = CliRunner()

RUN_ENVIRONMENT = {
    "GITHUB_TOKEN": "ghs_token",
    "GITHUB_REPOSITORY": "octo/monorepo",
    "GITHUB_REF": "refs/heads/main",
    "GITHUB_SHA": "abc123",
}


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Run from an empty directory without any GitHub Actions variables set."""
    monkeypatch.chdir(tmp_path)
    for name in [*RUN_ENVIRONMENT, "GITHUB_OUTPUT", "NPM_TOKEN", "INPUT_VERSION", "INPUT_AUTOPUBLISH", "DEBUG"]:
        monkeypatch.delenv(name, raising=False)


def test_run_missing_token_reports_error() -> None:
    """Test that a missing GITHUB_TOKEN fails the run with a workflow error annotation."""
    result = runner.invoke(typer_app, ["run"])

    assert result.exit_code == 1
    assert "::error::Missing required configuration element: GitHub token" in result.output


def test_run_version_workflow(monkeypatch: MonkeyPatch) -> None:
    """Test that the CLI reconciles inputs and reports the release pull request."""
    workflow = AsyncMock(return_value=VersionWorkflowResult(pull_request_number=42, created=True, changed_packages=[]))
    monkeypatch.setattr("changeset_release.configuration.cli.run_changeset_release_workflow", workflow)

    result = runner.invoke(typer_app, ["run", "--title", "Release", "--dedupe"], env=RUN_ENVIRONMENT)

    assert result.exit_code == 0, result.output
    assert "Created release pull request #42 for 0 package(s)" in result.output
    config = workflow.await_args.args[0]
    assert config.pr_title == "Release"
    assert config.dedupe is True
    assert config.auto_publish is False
    assert config.context.branch == "main"


def test_run_inputs_from_environment(monkeypatch: MonkeyPatch) -> None:
    """Test that action inputs are read from INPUT_* variables."""
    workflow = AsyncMock(return_value=None)
    monkeypatch.setattr("changeset_release.configuration.cli.run_changeset_release_workflow", workflow)

    result = runner.invoke(typer_app, ["run"], env={**RUN_ENVIRONMENT, "INPUT_VERSION": "yarn release:version", "INPUT_AUTOPUBLISH": "true"})

    assert result.exit_code == 0, result.output
    config = workflow.await_args.args[0]
    assert config.version_command == "yarn release:version"
    assert config.auto_publish is True


def test_run_publish_workflow(monkeypatch: MonkeyPatch) -> None:
    """Test that published packages are listed."""
    workflow = AsyncMock(
        return_value=PublishResult(published=True, published_packages=[PublishedPackage(name="pkg-a", version="1.1.0")])
    )
    monkeypatch.setattr("changeset_release.configuration.cli.run_changeset_release_workflow", workflow)

    result = runner.invoke(typer_app, ["run", "--auto-publish"], env=RUN_ENVIRONMENT)

    assert result.exit_code == 0, result.output
    assert "Published pkg-a@1.1.0" in result.output


def test_run_workflow_failure(monkeypatch: MonkeyPatch) -> None:
    """Test that a failing workflow exits non-zero with the error message."""
    workflow = AsyncMock(side_effect=RuntimeError("push rejected"))
    monkeypatch.setattr("changeset_release.configuration.cli.run_changeset_release_workflow", workflow)

    result = runner.invoke(typer_app, ["run"], env=RUN_ENVIRONMENT)

    assert result.exit_code == 1
    assert "::error::push rejected" in result.output
