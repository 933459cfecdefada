"""Partitioning presubmits into jobs to trigger and jobs to skip.

Each presubmit is run through a filter. Matched presubmits are resolved
against their own run conditions and land in exactly one of the two
output lists; unmatched presubmits land in neither. Both lists keep the
input order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from presubmit_gate.filters.decision import Matched
from presubmit_gate.logging.audit import log_filter_summary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from presubmit_gate.filters.filters import Filter
    from presubmit_gate.jobs.changes import ChangedFilesProvider
    from presubmit_gate.jobs.presubmit import JobDefinition

logger = logging.getLogger(__name__)


class RunConditionEvaluationError(Exception):
    """Raised when a presubmit's run conditions cannot be evaluated."""

    def __init__(self, job_name: str, cause: Exception) -> None:
        """Initialize RunConditionEvaluationError.

        Args:
            job_name: Presubmit whose evaluation failed
            cause: Error reported by the presubmit
        """
        self.job_name = job_name
        self.cause = cause
        super().__init__(
            f"Failed to determine if presubmit '{job_name}' should run: {cause}"
        )


class SummarySink(Protocol):
    """Receives the summary of a partition for observability."""

    def __call__(
        self,
        *,
        to_trigger: list[str],
        to_skip: list[str],
        total_count: int,
        trigger_count: int,
        skip_count: int,
    ) -> None: ...


@dataclass
class PartitionResult:
    """Presubmits to trigger and to skip, in input order."""

    to_trigger: list[JobDefinition] = field(default_factory=list)
    to_skip: list[JobDefinition] = field(default_factory=list)

    @property
    def trigger_names(self) -> list[str]:
        """Get names of the presubmits to trigger."""
        return [job.name for job in self.to_trigger]

    @property
    def skip_names(self) -> list[str]:
        """Get names of the presubmits to skip."""
        return [job.name for job in self.to_skip]


def filter_presubmits(
    job_filter: Filter,
    changes: ChangedFilesProvider,
    branch: str,
    presubmits: Sequence[JobDefinition],
    *,
    sink: SummarySink | None = None,
) -> PartitionResult:
    """Determine which presubmits should run and which should be skipped.

    Args:
        job_filter: Filter selecting the presubmits for the event.
        changes: Changed files, consulted by change-gated presubmits.
        branch: Base branch of the change.
        presubmits: Candidate presubmits, in evaluation order.
        sink: Receives the summary record (default: log_filter_summary).

    Returns:
        PartitionResult with the presubmits to trigger and to skip.

    Raises:
        RunConditionEvaluationError: On the first presubmit whose run
            conditions fail to evaluate. Later presubmits are not checked.
    """
    result = PartitionResult()

    for presubmit in presubmits:
        decision = job_filter(presubmit)
        if not isinstance(decision, Matched):
            logger.debug("Presubmit '%s' did not match the filter", presubmit.name)
            continue

        try:
            should_run = presubmit.should_run(
                branch, changes, decision.forced, decision.default_behavior
            )
        except Exception as e:
            raise RunConditionEvaluationError(presubmit.name, e) from e

        if should_run:
            result.to_trigger.append(presubmit)
        else:
            result.to_skip.append(presubmit)
        logger.debug(
            "Presubmit '%s' matched (forced=%s, default=%s): %s",
            presubmit.name,
            decision.forced,
            decision.default_behavior,
            "trigger" if should_run else "skip",
        )

    _emit_summary(sink or log_filter_summary, result, len(presubmits))
    return result


def _emit_summary(sink: SummarySink, result: PartitionResult, total: int) -> None:
    try:
        sink(
            to_trigger=result.trigger_names,
            to_skip=result.skip_names,
            total_count=total,
            trigger_count=len(result.to_trigger),
            skip_count=len(result.to_skip),
        )
    except Exception as e:
        logger.warning("Failed to record filter summary: %s", e)
