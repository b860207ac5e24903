"""Contains results of the version and publish workflows."""

from pydantic import BaseModel, Field, TypeAdapter

from changeset_release.workspace.packages import Package


class PublishedPackage(BaseModel):
    """A package version the publish tool pushed to the registry during this run."""

    name: str
    version: str


PUBLISHED_PACKAGES_ADAPTER = TypeAdapter(list[PublishedPackage])


class PublishResult(BaseModel):
    """Aggregate result of the publish workflow."""

    published: bool
    published_packages: list[PublishedPackage] = Field(default_factory=list)

    def published_packages_json(self) -> str:
        """Serialize the published packages as a JSON array of {name, version} objects."""
        return PUBLISHED_PACKAGES_ADAPTER.dump_json(self.published_packages).decode()


class VersionWorkflowResult:
    """Contains results of the version workflow."""

    def __init__(self, pull_request_number: int, created: bool, changed_packages: list[Package]) -> None:
        """Initialize the result with the release pull request and the versioned packages."""
        self.pull_request_number = pull_request_number
        self.created = created
        self.changed_packages = changed_packages
