"""Ordering of release notes inside the release pull request body."""

from typing import Iterable

from .models import PackageReleaseNotes


def release_sort_key(notes: PackageReleaseNotes) -> tuple[int, bool]:
    """Sort key placing higher severities first and private packages after public ones."""
    return (-int(notes.highest_level), notes.is_private)


def sort_release_notes(notes: Iterable[PackageReleaseNotes]) -> list[PackageReleaseNotes]:
    """Order release notes for presentation.

    Python's sort is stable, so notes that compare equal keep their input order
    and the result is the same no matter how often the input is re-sorted.
    """
    return sorted(notes, key=release_sort_key)
