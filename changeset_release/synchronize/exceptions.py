"""Custom exceptions raised by the version and publish workflows."""


class MissingChangelogEntryError(Exception):
    """Raised when a package that was versioned or published has no changelog entry for its version."""

    def __init__(self, package_name: str, version: str, reason: str = "no entry for this version") -> None:
        """Initializes the exception with the package release identity."""
        super().__init__(f"Could not find changelog entry for {package_name}@{version}: {reason}")
        self.package_name = package_name
        self.version = version
