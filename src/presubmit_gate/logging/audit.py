"""Structured JSON logging and filter decision records.

This module provides:
- structlog configuration for JSON logging to stderr
- Secret redaction for tokens pasted into comments or changed-file lists
- Structured log events for trigger comments and filter summaries
"""

from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import EventDict, WrappedLogger

# Patterns for secret redaction
SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # GitHub tokens (ghp_, gho_, ghu_, ghs_, ghr_ prefixes)
    (re.compile(r"(gh[pousr]_[A-Za-z0-9_]{36,})"), "[REDACTED_GITHUB_TOKEN]"),
    (re.compile(r"(token[=:]\s*['\"]?)([A-Za-z0-9_-]{20,})"), r"\1[REDACTED]"),
    (re.compile(r"(Bearer\s+)([A-Za-z0-9._-]+)", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(authorization[=:]\s*['\"]?)([^\s'\"]+)", re.IGNORECASE), r"\1[REDACTED]"),
]

# Comment bodies are logged truncated to this many characters
COMMENT_PREVIEW_LENGTH = 100


def redact_secrets(value: Any) -> Any:
    """Redact sensitive values from a string, dict, or list.

    Args:
        value: Value to redact. Can be str, dict, list, or other.

    Returns:
        Value with sensitive data redacted
    """
    if isinstance(value, str):
        result = value
        for pattern, replacement in SECRET_PATTERNS:
            result = pattern.sub(replacement, result)
        return result

    if isinstance(value, dict):
        return {k: redact_secrets(v) for k, v in value.items()}

    if isinstance(value, list):
        return [redact_secrets(item) for item in value]

    return value


def _redact_processor(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """structlog processor that redacts secrets from log events."""
    return redact_secrets(event_dict)


def configure_logging(
    verbose: bool = False,
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        verbose: If True, enable DEBUG level. Otherwise INFO.
        json_output: If True, output JSON. Otherwise use console format.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    processors: list[Callable[..., Any]] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def log_comment_received(
    body: str,
    branch: str,
    presubmit_count: int,
) -> None:
    """Log a trigger comment about to be evaluated.

    Args:
        body: Comment body (logged truncated)
        branch: Base branch of the change
        presubmit_count: Number of candidate presubmits
    """
    log = get_logger("presubmit_gate.events")
    log.debug(
        "comment_received",
        comment_preview=redact_secrets(body)[:COMMENT_PREVIEW_LENGTH],
        branch=branch,
        presubmit_count=presubmit_count,
    )


def log_filter_summary(
    *,
    to_trigger: list[str],
    to_skip: list[str],
    total_count: int,
    trigger_count: int,
    skip_count: int,
) -> None:
    """Log the outcome of filtering a batch of presubmits.

    Args:
        to_trigger: Names of presubmits to trigger, in input order
        to_skip: Names of presubmits to skip, in input order
        total_count: Number of presubmits considered
        trigger_count: Number of presubmits to trigger
        skip_count: Number of presubmits to skip
    """
    log = get_logger("presubmit_gate.filters")
    log.debug(
        "presubmits_filtered",
        to_trigger=to_trigger,
        to_skip=to_skip,
        total_count=total_count,
        trigger_count=trigger_count,
        skip_count=skip_count,
        message=(
            f"Filtered {total_count} jobs, found {trigger_count} to trigger "
            f"and {skip_count} to skip."
        ),
    )
