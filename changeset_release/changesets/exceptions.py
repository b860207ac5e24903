"""Custom exceptions for the changesets module."""


class ChangesetParseError(Exception):
    """Raised when a changeset file or the pre-release state file cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        """Initializes the exception with the offending file and the reason."""
        super().__init__(f"Failed to parse {path}: {reason}")
        self.path = path
        self.reason = reason
