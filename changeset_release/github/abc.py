"""Base ABC for the hosting service clients used by the release workflows."""

from abc import ABC, abstractmethod
from typing import Any


class GitHubClientBase(ABC):
    """Operations the version and publish workflows need from the hosting service.

    Implementations are bound to a single repository.
    """

    owner: str
    repo_name: str

    # Pull Requests
    @abstractmethod
    async def list_pull_requests(self, state: str = "open", **filters: Any) -> list[Any]:
        """List pull requests matching the given filters."""
        pass

    @abstractmethod
    async def find_open_pull_requests(self, head: str, base: str) -> list[Any]:
        """Find open pull requests from a branch of this repository into the base branch."""
        pass

    @abstractmethod
    async def create_pull_request(self, title: str, head: str, base: str, body: str) -> Any:
        """Open a pull request; the returned object exposes its `number`."""
        pass

    @abstractmethod
    async def update_pull_request(self, pull_number: int, title: str, body: str) -> Any:
        """Replace the title and body of an existing pull request."""
        pass

    # Releases
    @abstractmethod
    async def create_release(self, tag_name: str, name: str, body: str, prerelease: bool = False) -> Any:
        """Create a release, and its tag at the default branch head if the tag does not exist."""
        pass
