"""Changelog entry extraction and release note ordering."""

from .extractor import get_changelog_entry
from .models import (
    BumpLevel,
    ChangelogEntry,
    PackageReleaseNotes,
    ReleaseSection,
    VersionPullRequestBody,
)
from .ordering import release_sort_key, sort_release_notes

__all__ = [
    "BumpLevel",
    "ChangelogEntry",
    "PackageReleaseNotes",
    "ReleaseSection",
    "VersionPullRequestBody",
    "get_changelog_entry",
    "release_sort_key",
    "sort_release_notes",
]
