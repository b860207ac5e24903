"""Pydantic models for pending changesets and pre-release state."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Changeset(BaseModel):
    """A pending, author-supplied description of an unreleased change."""

    id: str
    summary: str
    releases: dict[str, str] = Field(default_factory=dict)


class PreState(BaseModel):
    """Contents of .changeset/pre.json, present while the workspace is in pre mode."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Literal["pre", "exit"]
    tag: str
    initial_versions: dict[str, str] = Field(default_factory=dict, alias="initialVersions")
    changesets: list[str] = Field(default_factory=list)


class ChangesetState(BaseModel):
    """Snapshot of the pending changesets and the active pre-release mode, if any."""

    changesets: list[Changeset] = Field(default_factory=list)
    pre_state: PreState | None = None

    @property
    def has_changesets(self) -> bool:
        """Whether any changeset is still waiting to be versioned."""
        return len(self.changesets) > 0
