"""Data models for changelog entries and release pull request bodies."""

from enum import IntEnum

from pydantic import BaseModel


class BumpLevel(IntEnum):
    """Severity of a change, ordered from least to most significant."""

    DEP = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3


class ChangelogEntry(BaseModel):
    """The changelog section belonging to one released version of a package."""

    content: str
    highest_level: BumpLevel = BumpLevel.DEP


class PackageReleaseNotes(BaseModel):
    """A package's changelog entry, labelled with its release identity."""

    name: str
    version: str
    is_private: bool = False
    entry: ChangelogEntry

    @property
    def highest_level(self) -> BumpLevel:
        """Severity of the changelog entry."""
        return self.entry.highest_level

    @property
    def release_identity(self) -> str:
        """The 'name@version' identity used for headings, tags and release titles."""
        return f"{self.name}@{self.version}"


class ReleaseSection(BaseModel):
    """A rendered section of the release pull request body."""

    heading: str
    content: str


class VersionPullRequestBody(BaseModel):
    """Context used to render the release pull request body template."""

    branch: str
    auto_publish: bool
    pre_state_tag: str | None = None
    sections: list[ReleaseSection]
