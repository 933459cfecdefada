"""Filters selecting presubmits for a triggering event.

This module provides the filters a trigger handler composes:
- CommandFilter: jobs named by an explicit `/test <job>` comment
- TestAllFilter: jobs picked up implicitly by `/test all`
- AggregateFilter: ordered, first-match-wins union of filters

Filters are immutable and side-effect free, so one instance can be shared
between callers. Each evaluation returns a fresh Decision.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from presubmit_gate.filters.decision import NO_MATCH, Decision, Matched

if TYPE_CHECKING:
    from collections.abc import Sequence

    from presubmit_gate.jobs.presubmit import JobDefinition

# A line that is `/test all`, optionally followed by a comma, then
# whitespace and anything else.
TEST_ALL_RE = re.compile(r"(?m)^/test all,?($|\s.*)")


class Filter(ABC):
    """Base class for presubmit filters."""

    @abstractmethod
    def evaluate(self, job: JobDefinition) -> Decision:
        """Decide whether a job is selected and how it should be run.

        Args:
            job: Job definition to check.

        Returns:
            Matched with run flags, or NoMatch.
        """
        ...

    def __call__(self, job: JobDefinition) -> Decision:
        return self.evaluate(job)


@dataclass(frozen=True)
class CommandFilter(Filter):
    """Selects jobs whose trigger matches a comment body.

    An explicit request both selects and forces the job. The default
    behavior is pinned to True since a forced job never falls back to it.
    """

    body: str

    def evaluate(self, job: JobDefinition) -> Decision:
        if job.trigger_matches(self.body):
            return Matched(forced=True, default_behavior=True)
        return NO_MATCH


@dataclass(frozen=True)
class TestAllFilter(Filter):
    """Selects every job that doesn't require an explicit trigger.

    Selected jobs are not forced and default to not running, so their own
    conditions decide.
    """

    def evaluate(self, job: JobDefinition) -> Decision:
        if job.needs_explicit_trigger():
            return NO_MATCH
        return Matched(forced=False, default_behavior=False)


@dataclass(frozen=True)
class AggregateFilter(Filter):
    """Evaluates child filters in order and returns the first match.

    Later filters are not consulted once one matches, so their run flags
    are discarded. An empty aggregate never matches.
    """

    filters: tuple[Filter, ...] = ()

    def evaluate(self, job: JobDefinition) -> Decision:
        for child in self.filters:
            decision = child.evaluate(job)
            if decision.matches:
                return decision
        return NO_MATCH


def command_filter(body: str) -> Filter:
    """Build a filter for an explicit `/test <job>` comment.

    Args:
        body: Comment body.

    Returns:
        Filter matching jobs whose trigger matches the body.
    """
    return CommandFilter(body)


def test_all_filter() -> Filter:
    """Build a filter for the implicit behavior of `/test all`.

    Jobs whose trigger explicitly matches `/test all` are handled by a
    command filter for the comment in question.
    """
    return TestAllFilter()


def aggregate_filter(filters: Sequence[Filter]) -> Filter:
    """Build a first-match-wins filter from an ordered list of filters."""
    return AggregateFilter(tuple(filters))


def filter_for_comment(body: str) -> Filter:
    """Build the filter for a comment left on a pull request.

    The command filter always comes first so that a job named explicitly
    is forced even when `/test all` would also select it.

    Args:
        body: Comment body.

    Returns:
        Aggregate of the command filter and, when the body asks for it,
        the test-all filter.
    """
    filters: list[Filter] = [command_filter(body)]
    if TEST_ALL_RE.search(body):
        filters.append(test_all_filter())
    return aggregate_filter(filters)
