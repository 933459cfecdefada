"""Shared pytest fixtures for presubmit-gate tests.

This module provides common fixtures for:
- Temporary config files
- Fake job definitions recording how they were evaluated
- Resetting logging configuration between tests
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import structlog
import yaml

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by a test.

    configure_logging() binds structlog and the root logger to the
    current stderr, which CliRunner replaces for the duration of a call.
    """
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


# ============================================================================
# Job Definition Fixtures
# ============================================================================


class FakeJob:
    """Job definition with canned answers that records its evaluations."""

    def __init__(
        self,
        name: str,
        *,
        trigger: str | None = None,
        needs_explicit: bool = False,
        runs: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.trigger = trigger if trigger is not None else rf"(?m)^/test {re.escape(name)}$"
        self.needs_explicit = needs_explicit
        self.runs = runs
        self.error = error
        self.calls: list[tuple[str, Any, bool, bool]] = []

    def trigger_matches(self, body: str) -> bool:
        return re.search(self.trigger, body) is not None

    def needs_explicit_trigger(self) -> bool:
        return self.needs_explicit

    def should_run(
        self,
        branch: str,
        changes: Any,
        forced: bool,
        default_behavior: bool,
    ) -> bool:
        self.calls.append((branch, changes, forced, default_behavior))
        if self.error is not None:
            raise self.error
        return self.runs

    def __repr__(self) -> str:
        return f"FakeJob({self.name!r})"


@pytest.fixture
def make_job() -> Callable[..., FakeJob]:
    """Factory fixture for fake job definitions.

    Accepts the FakeJob keyword arguments: trigger, needs_explicit, runs
    and error.
    """

    def _make(name: str, **kwargs: Any) -> FakeJob:
        return FakeJob(name, **kwargs)

    return _make


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid configuration dictionary."""
    return {
        "version": 1,
        "presubmits": [],
    }


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Return a configuration covering each kind of presubmit."""
    return {
        "version": 1,
        "presubmits": [
            {"name": "unit", "always_run": True},
            {"name": "docs", "run_if_changed": "^docs/"},
            {"name": "e2e"},
            {"name": "release-check", "always_run": True, "branches": ["release-.*"]},
        ],
    }


@pytest.fixture
def write_config(temp_dir: Path) -> Callable[..., Path]:
    """Factory fixture to write config files.

    Args:
        config: Configuration dictionary
        filename: Name of the config file (default: config.yaml)

    Returns:
        Path to the written config file
    """

    def _write(config: dict[str, Any], filename: str = "config.yaml") -> Path:
        path = temp_dir / filename
        with path.open("w") as f:
            yaml.safe_dump(config, f)
        return path

    return _write
