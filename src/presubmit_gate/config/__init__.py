"""Configuration module for presubmit-gate.

Usage:
    from presubmit_gate.config import load_config

    config = load_config()  # Auto-discovers config file
    config = load_config("/path/to/presubmits.yaml")  # Explicit path
"""

from presubmit_gate.config.loader import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EnvironmentVariableError,
    discover_config_path,
    load_config,
)
from presubmit_gate.config.schema import Config

__all__ = [
    "Config",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "discover_config_path",
    "load_config",
]
