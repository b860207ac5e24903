"""Discovers workspace packages and tracks which of them changed version."""

import glob
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence, TypeAlias

import structlog

from changeset_release.utils.constants import DEFAULT_PACKAGE_VERSION, PACKAGE_MANIFEST_FILENAME, WORKSPACE_IGNORED_DIRECTORY
from changeset_release.workspace.exceptions import WorkspaceError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

VersionSnapshot: TypeAlias = dict[Path, str]
"""Mapping from package directory to the version in its manifest."""


@dataclass(frozen=True)
class Package:
    """A package inside the workspace, identified by its directory."""

    name: str
    version: str
    directory: Path
    is_private: bool = False

    @property
    def release_identity(self) -> str:
        """The 'name@version' identity used for git tags and release titles."""
        return f"{self.name}@{self.version}"


@dataclass
class WorkspaceIndex:
    """Packages of a workspace in discovery order, indexed by name."""

    root: Path
    packages: list[Package] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Build the name lookup table."""
        self._by_name: dict[str, Package] = {package.name: package for package in self.packages}

    def get(self, name: str) -> Package | None:
        """Look up a package by its manifest name."""
        return self._by_name.get(name)

    def versions_by_directory(self) -> VersionSnapshot:
        """Snapshot the current version of every package."""
        return {package.directory: package.version for package in self.packages}


def load_manifest(path: Path) -> dict[str, Any]:
    """Load and parse a package.json manifest."""
    try:
        with open(path, encoding="utf-8") as f:
            manifest = json.load(f)
    except json.JSONDecodeError as exc:
        raise WorkspaceError(f"Malformed package manifest {path}: {exc}") from exc
    if not isinstance(manifest, dict):
        raise WorkspaceError(f"Package manifest {path} must contain a JSON object")
    return manifest


def get_workspace_member_globs(manifest: dict[str, Any]) -> list[str]:
    """Extract workspace member glob patterns from the root manifest.

    Both the list form ("workspaces": ["packages/*"]) and the object form
    ("workspaces": {"packages": ["packages/*"]}) are accepted.
    """
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if not workspaces:
        raise WorkspaceError("No workspaces defined in the root package.json")
    return [str(pattern) for pattern in workspaces]


def read_package(directory: Path) -> Package:
    """Read a single package from its directory's manifest."""
    manifest = load_manifest(directory / PACKAGE_MANIFEST_FILENAME)
    name = manifest.get("name")
    if not name:
        raise WorkspaceError(f"Package manifest in {directory} has no name")
    return Package(
        name=name,
        version=manifest.get("version", DEFAULT_PACKAGE_VERSION),
        directory=directory,
        is_private=bool(manifest.get("private", False)),
    )


def expand_member_globs(root: Path, member_globs: Sequence[str]) -> list[Path]:
    """Expand workspace member globs into package directories.

    "**" matches any number of nested directories. Patterns prefixed with "!"
    exclude the directories they match. Directories under node_modules are
    never members. Matches keep pattern order and are sorted within a pattern.
    """
    include = [pattern for pattern in member_globs if not pattern.startswith("!")]
    exclude = [pattern[1:] for pattern in member_globs if pattern.startswith("!")]

    excluded: set[Path] = set()
    for pattern in exclude:
        excluded.update(Path(match) for match in glob.glob(str(root / pattern), recursive=True))

    directories: list[Path] = []
    for pattern in include:
        for match in sorted(glob.glob(str(root / pattern), recursive=True)):
            directory = Path(match)
            if directory in excluded or directory in directories or WORKSPACE_IGNORED_DIRECTORY in directory.relative_to(root).parts:
                continue
            if (directory / PACKAGE_MANIFEST_FILENAME).is_file():
                directories.append(directory)
    return directories


def discover_packages(cwd: Path) -> WorkspaceIndex:
    """Scan the workspace and discover all packages.

    Reads the "workspaces" globs from the root package.json, expands them and
    reads each matching directory's package.json. The root package itself is
    not part of the result.
    """
    root = cwd.resolve()
    root_manifest_path = root / PACKAGE_MANIFEST_FILENAME
    if not root_manifest_path.exists():
        raise WorkspaceError(f"No {PACKAGE_MANIFEST_FILENAME} found in workspace root {root}")
    member_globs = get_workspace_member_globs(load_manifest(root_manifest_path))

    packages = [read_package(directory) for directory in expand_member_globs(root, member_globs) if directory != root]

    logger.debug("Discovered workspace packages", root=str(root), packages=[p.release_identity for p in packages])
    return WorkspaceIndex(root=root, packages=packages)


def get_versions_by_directory(cwd: Path) -> VersionSnapshot:
    """Snapshot the manifest version of every workspace package."""
    return discover_packages(cwd).versions_by_directory()


def get_changed_packages(before: VersionSnapshot, packages: Sequence[Package]) -> list[Package]:
    """Find the packages whose version differs from the snapshot.

    A package missing from the snapshot was created in between and counts as
    changed. The result keeps the order of the given packages.
    """
    changed = [package for package in packages if before.get(package.directory) != package.version]
    logger.info("Resolved changed packages", changed=[p.release_identity for p in changed])
    return changed
