"""Custom exceptions for the publish module."""


class PublishOutputMismatchError(Exception):
    """Raised when the publish tool reports a package that is not part of the workspace."""

    def __init__(self, identifier: str) -> None:
        """Initializes the exception with the unresolvable package identifier."""
        super().__init__(f"Publish output reported package '{identifier}', which is not a workspace package")
        self.identifier = identifier
