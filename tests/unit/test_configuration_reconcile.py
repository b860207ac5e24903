"""Unit tests for the configuration.reconcile module."""

from pathlib import Path
from typing import Any

import pytest

from changeset_release.configuration.env import Settings
from changeset_release.configuration.exceptions import RequiredConfigurationElementError
from changeset_release.configuration.models import ActionConfig
from changeset_release.configuration.reconcile import reconcile_action_configuration, validate_npm_token


def make_settings(**overrides: Any) -> Settings:
    """Build settings for a push to main, ignoring the real environment's .env file."""
    values: dict[str, Any] = {
        "DEBUG": False,
        "HOME": Path("/home/runner"),
        "GITHUB_API_URL": "https://api.github.com",
        "GITHUB_TOKEN": "ghs_token",
        "GITHUB_REPOSITORY": "octo/monorepo",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_SHA": "abc123",
        "GITHUB_OUTPUT": None,
        "NPM_TOKEN": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.mark.asyncio
async def test_reconcile_defaults(tmp_path: Path) -> None:
    """Test reconciliation when only the environment is provided."""
    # When
    result = await reconcile_action_configuration(make_settings(), cli_cwd=tmp_path)

    # Then
    assert isinstance(result, ActionConfig)
    assert result.debug is False
    assert result.github_token == "ghs_token"
    assert result.context.repo == "octo/monorepo"
    assert result.context.branch == "main"
    assert result.context.sha == "abc123"
    assert result.context.cwd == tmp_path.resolve()
    assert result.context.release_branch == "changeset-release/main"
    assert result.version_command == "yarn changeset version"
    assert result.pr_title == "Version Packages"
    assert result.commit_message == "Version Packages"
    assert result.auto_publish is False
    assert result.dedupe is False
    assert result.require_changelog_entries is True


@pytest.mark.asyncio
async def test_reconcile_with_cli_args(tmp_path: Path) -> None:
    """Test that CLI values are used over the defaults."""
    # Given
    output_path = tmp_path / "github_output"

    # When
    result = await reconcile_action_configuration(
        make_settings(DEBUG=False, GITHUB_OUTPUT=output_path, NPM_TOKEN="npm_token", GITHUB_REF="refs/heads/release/v2"),
        cli_debug=True,
        cli_version_command="yarn release:version",
        cli_pr_title="Release",
        cli_commit_message="chore: release",
        cli_auto_publish=True,
        cli_dedupe=True,
        cli_cwd=tmp_path,
        cli_require_changelog_entries=False,
    )

    # Then
    assert result.debug is True
    assert result.version_command == "yarn release:version"
    assert result.pr_title == "Release"
    assert result.commit_message == "chore: release"
    assert result.auto_publish is True
    assert result.dedupe is True
    assert result.require_changelog_entries is False
    assert result.output_path == output_path
    assert result.npm_token == "npm_token"
    assert result.context.release_branch == "changeset-release/release/v2"


@pytest.mark.asyncio
async def test_reconcile_debug_from_env(tmp_path: Path) -> None:
    """Test that debug mode can be enabled from the environment."""
    result = await reconcile_action_configuration(make_settings(DEBUG=True), cli_debug=False, cli_cwd=tmp_path)

    assert result.debug is True


@pytest.mark.asyncio
async def test_reconcile_empty_cli_values_fall_back_to_defaults(tmp_path: Path) -> None:
    """Test that empty inputs (unset action inputs) use the defaults."""
    result = await reconcile_action_configuration(make_settings(), cli_version_command="", cli_pr_title="", cli_commit_message="", cli_cwd=tmp_path)

    assert result.version_command == "yarn changeset version"
    assert result.pr_title == "Version Packages"
    assert result.commit_message == "Version Packages"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "missing_setting",
    [
        pytest.param("GITHUB_TOKEN", id="token"),
        pytest.param("GITHUB_REPOSITORY", id="repository"),
        pytest.param("GITHUB_REF", id="ref"),
        pytest.param("GITHUB_SHA", id="sha"),
    ],
)
async def test_reconcile_missing_required_setting(tmp_path: Path, missing_setting: str) -> None:
    """Test that a missing credential or run context value is reported by its environment variable."""
    with pytest.raises(RequiredConfigurationElementError, match=missing_setting) as exc_info:
        await reconcile_action_configuration(make_settings(**{missing_setting: None}), cli_cwd=tmp_path)

    assert exc_info.value.env_name == missing_setting


@pytest.mark.asyncio
async def test_validate_npm_token(tmp_path: Path) -> None:
    """Test that the registry token is only required when asked for."""
    without_token = await reconcile_action_configuration(make_settings(), cli_cwd=tmp_path)
    with_token = await reconcile_action_configuration(make_settings(NPM_TOKEN="npm_token"), cli_cwd=tmp_path)

    with pytest.raises(RequiredConfigurationElementError, match="NPM_TOKEN"):
        validate_npm_token(without_token)
    assert validate_npm_token(with_token) == "npm_token"
