"""Presubmit filters and the trigger/skip partitioner."""

from presubmit_gate.filters.decision import NO_MATCH, Decision, Matched, NoMatch
from presubmit_gate.filters.filters import (
    TEST_ALL_RE,
    AggregateFilter,
    CommandFilter,
    Filter,
    TestAllFilter,
    aggregate_filter,
    command_filter,
    filter_for_comment,
    test_all_filter,
)
from presubmit_gate.filters.partition import (
    PartitionResult,
    RunConditionEvaluationError,
    SummarySink,
    filter_presubmits,
)

__all__ = [
    "NO_MATCH",
    "TEST_ALL_RE",
    "AggregateFilter",
    "CommandFilter",
    "Decision",
    "Filter",
    "Matched",
    "NoMatch",
    "PartitionResult",
    "RunConditionEvaluationError",
    "SummarySink",
    "TestAllFilter",
    "aggregate_filter",
    "command_filter",
    "filter_for_comment",
    "filter_presubmits",
    "test_all_filter",
]
