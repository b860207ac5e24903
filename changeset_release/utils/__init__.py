"""Utility modules for shared functionality."""

from .constants import (
    CHANGELOG_FILENAME,
    PACKAGE_MANIFEST_FILENAME,
    PUBLISHED_PACKAGE_PATTERN,
    RELEASE_BRANCH_PREFIX,
)
from .process import ProcessExecutionError, ProcessResult, run_command

__all__ = [
    "CHANGELOG_FILENAME",
    "PACKAGE_MANIFEST_FILENAME",
    "PUBLISHED_PACKAGE_PATTERN",
    "RELEASE_BRANCH_PREFIX",
    "ProcessExecutionError",
    "ProcessResult",
    "run_command",
]
