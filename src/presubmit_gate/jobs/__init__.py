"""Presubmit job definitions and changed-file providers."""

from presubmit_gate.jobs.changes import (
    ChangedFilesError,
    ChangedFilesProvider,
    DeferredChangedFilesProvider,
    StaticChangedFilesProvider,
)
from presubmit_gate.jobs.presubmit import (
    Brancher,
    JobDefinition,
    Presubmit,
    RegexpChangeMatcher,
    default_rerun_command_for,
    default_trigger_for,
)

__all__ = [
    "Brancher",
    "ChangedFilesError",
    "ChangedFilesProvider",
    "DeferredChangedFilesProvider",
    "JobDefinition",
    "Presubmit",
    "RegexpChangeMatcher",
    "StaticChangedFilesProvider",
    "default_rerun_command_for",
    "default_trigger_for",
]
