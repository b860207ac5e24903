"""Detects which packages the external publish tool actually published."""

import re
from typing import Protocol

import structlog

from changeset_release.publish.exceptions import PublishOutputMismatchError
from changeset_release.utils.constants import ANSI_ESCAPE_PATTERN, PUBLISHED_PACKAGE_PATTERN
from changeset_release.workspace.packages import Package, WorkspaceIndex

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class PublishResultDetector(Protocol):
    """Protocol for turning raw publish tool output into published package identifiers."""

    def detect(self, output: str) -> list[str]:
        """Return the identifiers of the published packages, in output order."""
        ...


def strip_ansi(line: str) -> str:
    """Remove ANSI escape sequences (colors, cursor movement) from a line."""
    return ANSI_ESCAPE_PATTERN.sub("", line)


class YarnPublishDetector:
    """Detects published packages from `yarn workspaces foreach npm publish` output.

    Yarn prefixes each line with the workspace identifier in brackets and
    prints "Package archive published" once the archive was uploaded; packages
    that were already published never print that line.
    """

    def __init__(self, pattern: re.Pattern[str] = PUBLISHED_PACKAGE_PATTERN) -> None:
        """Initialize with the confirmation line pattern; group 1 must capture the identifier."""
        self.pattern = pattern

    def detect(self, output: str) -> list[str]:
        """Scan the output line by line for publish confirmations."""
        identifiers: list[str] = []
        for line in output.splitlines():
            match = self.pattern.search(strip_ansi(line))
            if match is None:
                continue
            logger.debug("Found publish confirmation", line=line, identifier=match.group(1))
            identifiers.append(match.group(1))
        return identifiers


def resolve_published_packages(identifiers: list[str], index: WorkspaceIndex) -> list[Package]:
    """Map published identifiers to workspace packages.

    Raises:
        PublishOutputMismatchError: If an identifier is not a workspace package.
    """
    packages: list[Package] = []
    for identifier in identifiers:
        package = index.get(identifier)
        if package is None:
            logger.error("Published package is not part of the workspace", identifier=identifier)
            raise PublishOutputMismatchError(identifier)
        packages.append(package)
    return packages
