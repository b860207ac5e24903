"""Extract the changelog entry belonging to a single package version."""

import structlog

from ..utils.constants import (
    BUMP_TYPE_PATTERN,
    MARKDOWN_EMPHASIS_PATTERN,
    MARKDOWN_FENCE_PATTERN,
    MARKDOWN_HEADING_PATTERN,
    MARKDOWN_LINK_PATTERN,
)
from .models import BumpLevel, ChangelogEntry

logger = structlog.get_logger(__name__)


def heading_plain_text(text: str) -> str:
    """Strip inline links and emphasis so "## [1.1.0](url)" reads as "1.1.0"."""
    text = MARKDOWN_LINK_PATTERN.sub(r"\1", text)
    return MARKDOWN_EMPHASIS_PATTERN.sub("", text).strip()


def iter_headings(lines: list[str]) -> list[tuple[int, int, str]]:
    """Find the ATX headings of a markdown document.

    Headings inside fenced code blocks are skipped.

    Returns:
        List of (line index, depth, plain heading text) tuples in document order.
    """
    headings: list[tuple[int, int, str]] = []
    in_fence = False
    for index, line in enumerate(lines):
        if MARKDOWN_FENCE_PATTERN.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = MARKDOWN_HEADING_PATTERN.match(line)
        if match is not None:
            headings.append((index, len(match.group(1)), heading_plain_text(match.group(2))))
    return headings


def bump_level_of_heading(text: str) -> BumpLevel | None:
    """Map a sub-heading such as 'Minor Changes' to its bump level."""
    match = BUMP_TYPE_PATTERN.search(text)
    if match is None:
        return None
    return BumpLevel[match.group(1).upper()]


def get_changelog_entry(changelog: str, version: str) -> ChangelogEntry | None:
    """Extract the section of a changelog whose heading is exactly the given version.

    The section ends at the next heading of the same or a shallower depth. The
    highest level is the most significant change category named by a heading
    inside the section, or DEP if none is named.

    Args:
        changelog: Full text of the package's CHANGELOG.md.
        version: Version to look up (e.g., "1.1.0").

    Returns:
        The trimmed section body and its highest level, or None if the changelog
        has no section for the version.
    """
    lines = changelog.splitlines()
    headings = iter_headings(lines)

    start: tuple[int, int] | None = None
    end_line = len(lines)
    highest_level = BumpLevel.DEP
    for line_index, depth, text in headings:
        if start is None:
            if text == version:
                start = (line_index, depth)
            continue
        if depth <= start[1]:
            end_line = line_index
            break
        level = bump_level_of_heading(text)
        if level is not None:
            highest_level = max(highest_level, level)

    if start is None:
        logger.debug("No changelog section found for version", version=version)
        return None

    content = "\n".join(lines[start[0] + 1 : end_line]).strip()
    return ChangelogEntry(content=content, highest_level=highest_level)
