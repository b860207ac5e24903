"""Pending changeset and pre-release state reading."""

from .models import Changeset, ChangesetState, PreState
from .state import read_changeset_state

__all__ = ["Changeset", "ChangesetState", "PreState", "read_changeset_state"]
