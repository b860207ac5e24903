"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Changeset Constants
# -------------------

CHANGESET_DIRECTORY = ".changeset"
"""Directory (relative to the workspace root) holding pending changeset files."""

PRE_STATE_FILENAME = "pre.json"
"""File inside the changeset directory that marks the workspace as being in pre mode."""

CHANGESET_IGNORED_FILENAMES = frozenset({"README.md"})
"""Markdown files in the changeset directory that are not changesets."""

# Workspace Constants
# -------------------

PACKAGE_MANIFEST_FILENAME = "package.json"
"""Name of the manifest file for every workspace package."""

CHANGELOG_FILENAME = "CHANGELOG.md"
"""Name of the changelog file maintained by the version tool in each package directory."""

DEFAULT_PACKAGE_VERSION = "0.0.0"
"""Version assumed for a package manifest without a version field."""

WORKSPACE_IGNORED_DIRECTORY = "node_modules"
"""Directory never treated as a workspace member, even when a glob matches inside it."""

# Release Branch / Pull Request Constants
# ---------------------------------------

RELEASE_BRANCH_PREFIX = "changeset-release/"
"""Prefix of the long-lived release branch; the triggering branch name is appended."""

DEFAULT_PR_TITLE = "Version Packages"
"""Default title of the release pull request."""

DEFAULT_COMMIT_MESSAGE = "Version Packages"
"""Default message of the version bump commit."""

DEFAULT_VERSION_COMMAND = "yarn changeset version"
"""Default invocation of the external version-bump tool."""

GIT_USER_NAME = "github-actions[bot]"
GIT_USER_EMAIL = "github-actions[bot]@users.noreply.github.com"

# External Tool Commands
# ----------------------

LOCKFILE_UPDATE_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("yarn", "config", "set", "enableImmutableInstalls", "false"),
    ("yarn", "install", "--mode=update-lockfile"),
)
"""Commands regenerating the lock file after the version tool mutated manifests."""

LOCKFILE_DEDUPE_COMMAND: tuple[str, ...] = ("yarn", "dedupe")

PUBLISH_COMMAND: tuple[str, ...] = (
    "yarn",
    "workspaces",
    "foreach",
    "-itv",
    "--no-private",
    "npm",
    "publish",
    "--tolerate-republish",
)
"""Publishes every public workspace package, tolerating already-published versions."""

# Publish Output Patterns
# -----------------------

PUBLISHED_PACKAGE_PATTERN = re.compile(r"\[(.+)\]:.*Package archive published")
"""Pattern to match the confirmation line yarn prints once a package archive is published."""

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
"""Pattern to match ANSI escape sequences (colors, cursor movement) in captured output."""

# Changelog Patterns
# ------------------

MARKDOWN_HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
"""Pattern to match ATX markdown headings, capturing the hashes and the heading text."""

MARKDOWN_FENCE_PATTERN = re.compile(r"^[ \t]{0,3}(```|~~~)")
"""Pattern to match the opening or closing line of a fenced code block."""

BUMP_TYPE_PATTERN = re.compile(r"(major|minor|patch)", re.IGNORECASE)
"""Pattern to match the change category mentioned in a changelog sub-heading."""

MARKDOWN_LINK_PATTERN = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
"""Pattern to match an inline markdown link or image, capturing its text."""

MARKDOWN_EMPHASIS_PATTERN = re.compile(r"[*_`~]+")
"""Pattern to match emphasis, strikethrough and code span markers."""
