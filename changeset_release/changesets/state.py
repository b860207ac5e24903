"""Reads the pending changesets and pre-release state of a workspace."""

import json
import re
from pathlib import Path

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from changeset_release.changesets.exceptions import ChangesetParseError
from changeset_release.changesets.models import Changeset, ChangesetState, PreState
from changeset_release.utils.constants import CHANGESET_DIRECTORY, CHANGESET_IGNORED_FILENAMES, PRE_STATE_FILENAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t\r]*$\n?(.*)\Z", re.MULTILINE | re.DOTALL)


def parse_changeset(changeset_id: str, text: str) -> Changeset:
    """Parse a changeset markdown file.

    The optional YAML front matter maps package names to bump types; the rest
    of the file is the summary.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return Changeset(id=changeset_id, summary=text.strip())

    try:
        releases = yaml.load(match.group(1)) or {}
    except YAMLError as exc:
        raise ChangesetParseError(f"{changeset_id}.md", str(exc)) from exc
    if not isinstance(releases, dict):
        raise ChangesetParseError(f"{changeset_id}.md", "front matter must map package names to bump types")
    return Changeset(
        id=changeset_id,
        summary=match.group(2).strip(),
        releases={str(name): str(bump) for name, bump in releases.items()},
    )


def read_changesets(changeset_dir: Path) -> list[Changeset]:
    """Read every pending changeset file, ordered by id."""
    if not changeset_dir.is_dir():
        return []
    changesets: list[Changeset] = []
    for path in sorted(changeset_dir.glob("*.md")):
        if path.name in CHANGESET_IGNORED_FILENAMES:
            continue
        changesets.append(parse_changeset(path.stem, path.read_text(encoding="utf-8")))
    return changesets


def read_pre_state(changeset_dir: Path) -> PreState | None:
    """Read .changeset/pre.json if it exists."""
    pre_state_path = changeset_dir / PRE_STATE_FILENAME
    if not pre_state_path.exists():
        return None
    try:
        return PreState.model_validate(json.loads(pre_state_path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ChangesetParseError(str(pre_state_path), str(exc)) from exc


async def read_changeset_state(cwd: Path) -> ChangesetState:
    """Load the pending changesets and the active pre-release mode of a workspace.

    While in pre mode, changesets already consumed by an earlier prerelease are
    listed in pre.json and are not pending anymore. A pre.json in "exit" mode
    does not put the workspace in pre mode.
    """
    changeset_dir = cwd / CHANGESET_DIRECTORY
    pre_state = read_pre_state(changeset_dir)
    changesets = read_changesets(changeset_dir)

    if pre_state is not None and pre_state.mode != "pre":
        pre_state = None
    if pre_state is not None:
        consumed = set(pre_state.changesets)
        changesets = [changeset for changeset in changesets if changeset.id not in consumed]

    logger.info(
        "Read changeset state",
        changeset_count=len(changesets),
        pre_mode_tag=pre_state.tag if pre_state else None,
    )
    return ChangesetState(changesets=changesets, pre_state=pre_state)
