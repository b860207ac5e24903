"""Contains unit tests for the release action driver."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest import MonkeyPatch

from changeset_release.changesets.models import Changeset, ChangesetState
from changeset_release.configuration.exceptions import RequiredConfigurationElementError
from changeset_release.configuration.models import ActionConfig, ReleaseContext
from changeset_release.synchronize.driver import run_changeset_release_workflow, run_release_action
from changeset_release.synchronize.outputs import ActionOutputs
from changeset_release.synchronize.results import PublishedPackage, PublishResult, VersionWorkflowResult


def make_config(cwd: Path, auto_publish: bool = False, npm_token: str | None = None, output_path: Path | None = None) -> ActionConfig:
    """Build a configuration for a run triggered on main."""
    return ActionConfig(
        debug=False,
        github_api_url="https://api.github.com",
        github_token="ghs_token",
        npm_token=npm_token,
        home=cwd,
        output_path=output_path,
        context=ReleaseContext(repo="octo/monorepo", branch="main", sha="abc123", cwd=cwd),
        version_command="yarn changeset version",
        pr_title="Version Packages",
        commit_message="Version Packages",
        auto_publish=auto_publish,
        dedupe=False,
        require_changelog_entries=True,
    )


@pytest.fixture
def workflows(monkeypatch: MonkeyPatch) -> dict[str, AsyncMock]:
    """Replace both workflows and the changeset reader with mocks; no changesets pending by default."""
    mocks = {
        "read_changeset_state": AsyncMock(return_value=ChangesetState()),
        "run_version_workflow": AsyncMock(return_value=VersionWorkflowResult(pull_request_number=42, created=True, changed_packages=[])),
        "run_publish_workflow": AsyncMock(return_value=PublishResult(published=False)),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(f"changeset_release.synchronize.driver.{name}", mock)
    return mocks


@pytest.mark.asyncio
async def test_no_changesets_without_auto_publish(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that nothing runs and the default outputs are set when there is nothing to do."""
    outputs = ActionOutputs()

    result = await run_release_action(make_config(tmp_path), MagicMock(), MagicMock(), outputs)

    assert result is None
    assert outputs.values == {"published": "false", "publishedPackages": "[]", "hasChangesets": "false"}
    workflows["run_version_workflow"].assert_not_awaited()
    workflows["run_publish_workflow"].assert_not_awaited()


@pytest.mark.asyncio
async def test_pending_changesets_run_version_workflow(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that pending changesets select the version workflow, even with auto-publish enabled."""
    workflows["read_changeset_state"].return_value = ChangesetState(changesets=[Changeset(id="brave-dogs-run", summary="Fix")])
    config = make_config(tmp_path, auto_publish=True, npm_token="npm_token")
    adapter, git, outputs = MagicMock(), MagicMock(), ActionOutputs()

    result = await run_release_action(config, adapter, git, outputs)

    assert isinstance(result, VersionWorkflowResult)
    workflows["run_version_workflow"].assert_awaited_once_with(config, adapter, git)
    workflows["run_publish_workflow"].assert_not_awaited()
    assert outputs.values == {"published": "false", "publishedPackages": "[]", "hasChangesets": "true"}


@pytest.mark.asyncio
async def test_auto_publish_requires_npm_token(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that publishing without a registry token fails before publishing anything."""
    outputs = ActionOutputs()

    with pytest.raises(RequiredConfigurationElementError, match="NPM_TOKEN"):
        await run_release_action(make_config(tmp_path, auto_publish=True), MagicMock(), MagicMock(), outputs)

    workflows["run_publish_workflow"].assert_not_awaited()
    assert outputs.values["published"] == "false"


@pytest.mark.asyncio
async def test_auto_publish_sets_outputs(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that a successful publish overwrites the published outputs."""
    workflows["run_publish_workflow"].return_value = PublishResult(
        published=True, published_packages=[PublishedPackage(name="my-pkg", version="1.0.0")]
    )
    output_path = tmp_path / "github_output"
    config = make_config(tmp_path, auto_publish=True, npm_token="npm_token", output_path=output_path)
    adapter = MagicMock()

    result = await run_release_action(config, adapter, MagicMock(), ActionOutputs(output_path))

    assert isinstance(result, PublishResult)
    workflows["run_publish_workflow"].assert_awaited_once_with(config, "npm_token", adapter)
    assert output_path.read_text(encoding="utf-8").splitlines() == [
        "published=false",
        "publishedPackages=[]",
        "hasChangesets=false",
        "published=true",
        'publishedPackages=[{"name":"my-pkg","version":"1.0.0"}]',
    ]


@pytest.mark.asyncio
async def test_auto_publish_nothing_published(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that the outputs keep their defaults when nothing was published."""
    outputs = ActionOutputs()

    result = await run_release_action(make_config(tmp_path, auto_publish=True, npm_token="npm_token"), MagicMock(), MagicMock(), outputs)

    assert result == PublishResult(published=False)
    assert outputs.values == {"published": "false", "publishedPackages": "[]", "hasChangesets": "false"}


@pytest.mark.asyncio
async def test_version_workflow_failure_keeps_default_outputs(workflows: dict[str, AsyncMock], tmp_path: Path) -> None:
    """Test that outputs written before a failure remain in the output file."""
    workflows["read_changeset_state"].return_value = ChangesetState(changesets=[Changeset(id="brave-dogs-run", summary="Fix")])
    workflows["run_version_workflow"].side_effect = RuntimeError("push rejected")
    output_path = tmp_path / "github_output"

    with pytest.raises(RuntimeError, match="push rejected"):
        await run_release_action(make_config(tmp_path, output_path=output_path), MagicMock(), MagicMock(), ActionOutputs(output_path))

    assert "hasChangesets=true" in output_path.read_text(encoding="utf-8").splitlines()


@pytest.mark.asyncio
async def test_run_changeset_release_workflow_wires_dependencies(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Test that the environment is prepared and the adapter is created for the configured repository."""
    prepare_environment = AsyncMock()
    create_adapter = AsyncMock(return_value=MagicMock())
    run_action = AsyncMock(return_value=None)
    monkeypatch.setattr("changeset_release.synchronize.driver.prepare_environment", prepare_environment)
    monkeypatch.setattr("changeset_release.synchronize.driver.GitHubKitAdapter.create", create_adapter)
    monkeypatch.setattr("changeset_release.synchronize.driver.run_release_action", run_action)
    config = make_config(tmp_path)

    await run_changeset_release_workflow(config)

    prepare_environment.assert_awaited_once()
    create_adapter.assert_awaited_once_with(repo="octo/monorepo", github_token="ghs_token", github_api_url="https://api.github.com")
    run_action.assert_awaited_once()
    assert run_action.await_args.args[0] is config
