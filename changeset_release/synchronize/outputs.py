"""Writes the named results of a run for the invoking workflow."""

import uuid
from pathlib import Path

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class ActionOutputs:
    """Named outputs of the action, appended to the GITHUB_OUTPUT file.

    Values are written as soon as they are set, so outputs set before a
    failure stay visible to later workflow steps. The last value written for
    a name wins.
    """

    def __init__(self, output_path: Path | None = None) -> None:
        """Initialize with the GITHUB_OUTPUT file path; without one, outputs are only logged."""
        self.output_path = output_path
        self.values: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        """Set an output value."""
        self.values[name] = value
        logger.info("Setting output", name=name, value=value)
        if self.output_path is None:
            return
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            entry = f"{name}={value}\n"
        with open(self.output_path, "a", encoding="utf-8") as f:
            f.write(entry)
