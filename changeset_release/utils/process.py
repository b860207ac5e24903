"""Runs external processes (git, yarn, the version tool) on the event loop."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class ProcessExecutionError(Exception):
    """Raised when an external process exits with a non-zero return code."""

    def __init__(self, args: tuple[str, ...], returncode: int, output: str) -> None:
        """Initializes the exception with the failed command and its captured output."""
        super().__init__(f"Command '{' '.join(args)}' failed with exit code {returncode}:\n{output}")
        self.command = args
        self.returncode = returncode
        self.output = output


@dataclass
class ProcessResult:
    """Captured result of a finished external process."""

    args: tuple[str, ...]
    returncode: int
    output: str


REDACTED = "***"


def redact(text: str, secrets: Sequence[str]) -> str:
    """Mask every occurrence of the given secrets in a piece of text."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


async def run_command(
    command: str,
    *args: str,
    cwd: Path | str | None = None,
    check: bool = True,
    secrets: Sequence[str] = (),
) -> ProcessResult:
    """Run an external command and capture its combined stdout/stderr.

    Args:
        command: Executable to run (e.g., "git", "yarn").
        *args: Arguments passed to the executable.
        cwd: Working directory for the process.
        check: If True (default), raise ProcessExecutionError on a non-zero exit.
        secrets: Values (e.g., registry tokens) masked in logs, the result and raised errors.

    Returns:
        ProcessResult holding the return code and the decoded output.
    """
    full_args = (command, *args)
    display_args = tuple(redact(arg, secrets) for arg in full_args)
    logger.debug("Running command", command=" ".join(display_args), cwd=str(cwd) if cwd else None)
    process = await asyncio.create_subprocess_exec(
        *full_args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    stdout, _ = await process.communicate()
    output = redact(stdout.decode("utf-8", errors="replace"), secrets) if stdout else ""
    returncode = process.returncode if process.returncode is not None else 0
    for line in output.splitlines():
        logger.debug("Command output", command=command, line=line)

    result = ProcessResult(args=display_args, returncode=returncode, output=output)
    if check and returncode != 0:
        logger.error("Command failed", command=" ".join(display_args), returncode=returncode)
        raise ProcessExecutionError(display_args, returncode, output)
    return result
