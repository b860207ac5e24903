"""Contains exceptions raised when reading the package workspace."""


class WorkspaceError(Exception):
    """Raised when the workspace layout or a package manifest cannot be read."""

    pass
