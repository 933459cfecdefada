"""Presubmit job definitions and their run conditions.

This module provides:
- JobDefinition: the protocol filters and the partitioner depend on
- Brancher: branch allow/deny gating
- RegexpChangeMatcher: run_if_changed / skip_if_only_changed gating
- Presubmit: a concrete, configurable job definition

Run-condition resolution for a Presubmit, in order:
1. branch gating rejects the base branch -> don't run
2. always_run -> run
3. forced by the caller -> run
4. change-based conditions configured -> run iff the changes satisfy them
5. otherwise -> the caller's default behavior
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Annotated, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from presubmit_gate.jobs.changes import ChangedFilesProvider


class JobDefinition(Protocol):
    """What the filtering core needs from a job definition."""

    name: str

    def trigger_matches(self, body: str) -> bool:
        """Check whether a comment body matches the job's trigger."""
        ...

    def needs_explicit_trigger(self) -> bool:
        """Check whether the job only runs when explicitly requested."""
        ...

    def should_run(
        self,
        branch: str,
        changes: ChangedFilesProvider,
        forced: bool,
        default_behavior: bool,
    ) -> bool:
        """Resolve the job's own run conditions.

        Raises:
            Exception: Whatever the job's condition evaluation reports.
        """
        ...


def _validate_pattern(pattern: str) -> str:
    try:
        re.compile(pattern)
    except re.error as e:
        msg = f"invalid regular expression {pattern!r}: {e}"
        raise ValueError(msg) from e
    return pattern


def default_trigger_for(name: str) -> str:
    """Build the trigger regex used when a presubmit doesn't set one.

    Matches `/test <name>` on its own line, optionally among other job
    names, e.g. `/test lint unit`.
    """
    return rf"(?m)^/test (?:.*? )?{re.escape(name)}(?: .*?)?$"


def default_rerun_command_for(name: str) -> str:
    """Build the rerun command used when a presubmit doesn't set one."""
    return f"/test {name}"


class Brancher(BaseModel):
    """Branch gating for a job.

    Entries in either list match a branch when they are equal to it or,
    read as a regular expression, fully match it.

    Attributes:
        branches: Branches the job runs against (empty: all)
        skip_branches: Branches the job never runs against
    """

    model_config = ConfigDict(extra="forbid")

    branches: list[str] = Field(default_factory=list)
    skip_branches: list[str] = Field(default_factory=list)

    @field_validator("branches", "skip_branches")
    @classmethod
    def validate_branch_patterns(cls, v: list[str]) -> list[str]:
        """Validate each branch entry compiles as a regex."""
        for pattern in v:
            _validate_pattern(pattern)
        return v

    @model_validator(mode="after")
    def validate_branch_lists(self) -> Brancher:
        """Ensure branches and skip_branches aren't both set."""
        if self.branches and self.skip_branches:
            msg = "branches and skip_branches are mutually exclusive"
            raise ValueError(msg)
        return self

    def runs_against_all_branches(self) -> bool:
        """Check whether no branch gating is configured."""
        return not self.branches and not self.skip_branches

    def could_run(self, branch: str) -> bool:
        """Check whether the job may run against a base branch.

        Args:
            branch: Base branch of the change.

        Returns:
            False if a skip entry matches, else True if no allow list is
            configured or an allow entry matches.
        """
        if self.runs_against_all_branches():
            return True
        if _any_branch_matches(self.skip_branches, branch):
            return False
        return not self.branches or _any_branch_matches(self.branches, branch)


def _any_branch_matches(patterns: list[str], branch: str) -> bool:
    return any(p == branch or re.fullmatch(p, branch) for p in patterns)


class RegexpChangeMatcher(BaseModel):
    """Change-based gating for a job.

    Attributes:
        run_if_changed: Run when any changed file matches this regex
        skip_if_only_changed: Skip when every changed file matches this regex
    """

    model_config = ConfigDict(extra="forbid")

    run_if_changed: str | None = None
    skip_if_only_changed: str | None = None

    @field_validator("run_if_changed", "skip_if_only_changed")
    @classmethod
    def validate_change_pattern(cls, v: str | None) -> str | None:
        """Validate change patterns compile as regexes."""
        if v:
            _validate_pattern(v)
        return v

    @model_validator(mode="after")
    def validate_change_conditions(self) -> RegexpChangeMatcher:
        """Ensure only one change condition is set."""
        if self.run_if_changed and self.skip_if_only_changed:
            msg = "run_if_changed and skip_if_only_changed are mutually exclusive"
            raise ValueError(msg)
        return self

    def has_change_conditions(self) -> bool:
        """Check whether any change-based condition is configured."""
        return bool(self.run_if_changed or self.skip_if_only_changed)

    def runs_against_changes(self, files: list[str]) -> bool:
        """Check whether a set of changed files satisfies the conditions.

        Args:
            files: Changed paths.

        Returns:
            For run_if_changed, True if any path matches. For
            skip_if_only_changed, True if any path does not match.
        """
        if self.run_if_changed:
            return any(re.search(self.run_if_changed, f) for f in files)
        if self.skip_if_only_changed:
            return any(not re.search(self.skip_if_only_changed, f) for f in files)
        return False

    def resolve_changes(self, changes: ChangedFilesProvider) -> tuple[bool, bool]:
        """Decide from changed files, if change conditions are configured.

        Args:
            changes: Provider consulted only when a condition is set.

        Returns:
            Tuple of (determined, should_run).

        Raises:
            ChangedFilesError: If the provider cannot list the changes.
        """
        if not self.has_change_conditions():
            return False, False
        return True, self.runs_against_changes(changes.changed_files())


class Presubmit(Brancher, RegexpChangeMatcher):
    """A presubmit job definition.

    Attributes:
        name: Unique job name
        context: Status context reported for the job (default: name)
        always_run: Run on every change without being asked
        optional: Whether a failure blocks merging (informational)
        trigger: Regex matched against comment bodies
        rerun_command: Comment that re-runs the job
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    context: str | None = None
    always_run: bool = False
    optional: bool = False
    trigger: str | None = None
    rerun_command: str | None = None

    @field_validator("trigger")
    @classmethod
    def validate_trigger(cls, v: str | None) -> str | None:
        """Validate the trigger compiles as a regex."""
        if v:
            _validate_pattern(v)
        return v

    @model_validator(mode="after")
    def validate_presubmit(self) -> Presubmit:
        """Check cross-field constraints and fill trigger defaults."""
        if self.always_run and self.has_change_conditions():
            msg = (
                "always_run is mutually exclusive with "
                "run_if_changed and skip_if_only_changed"
            )
            raise ValueError(msg)

        if bool(self.trigger) != bool(self.rerun_command):
            msg = "trigger and rerun_command must be set together"
            raise ValueError(msg)

        if not self.trigger:
            self.trigger = default_trigger_for(self.name)
            self.rerun_command = default_rerun_command_for(self.name)
        if not self.context:
            self.context = self.name
        return self

    def trigger_matches(self, body: str) -> bool:
        """Check whether a comment body matches this job's trigger."""
        return self.trigger is not None and re.search(self.trigger, body) is not None

    def needs_explicit_trigger(self) -> bool:
        """Check whether the job only runs when asked for by name.

        Jobs that always run or that run based on changed files are picked
        up implicitly (e.g. by `/test all`).
        """
        return not (self.always_run or self.has_change_conditions())

    def should_run(
        self,
        branch: str,
        changes: ChangedFilesProvider,
        forced: bool,
        default_behavior: bool,
    ) -> bool:
        """Resolve whether this job should run for a change.

        Args:
            branch: Base branch of the change.
            changes: Provider for the changed files.
            forced: The caller explicitly asked for this job.
            default_behavior: Result when no condition decides.

        Returns:
            True if the job should be triggered.

        Raises:
            ChangedFilesError: If change conditions need files that can't
                be listed.
        """
        if not self.could_run(branch):
            return False
        if self.always_run:
            return True
        if forced:
            return True
        determined, should_run = self.resolve_changes(changes)
        if determined:
            return should_run
        return default_behavior
