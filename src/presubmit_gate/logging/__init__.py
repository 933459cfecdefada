"""Logging module for presubmit-gate.

This module provides structured JSON logging with:
- structlog configuration for consistent log formatting
- Secret redaction for tokens that end up in comment bodies
- Structured log events for filter decisions

Usage:
    from presubmit_gate.logging import configure_logging, log_filter_summary

    configure_logging(verbose=True)
"""

from presubmit_gate.logging.audit import (
    configure_logging,
    get_logger,
    log_comment_received,
    log_filter_summary,
    redact_secrets,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_comment_received",
    "log_filter_summary",
    "redact_secrets",
]
