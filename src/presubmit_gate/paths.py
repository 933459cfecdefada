"""XDG Base Directory Specification path utilities.

Configuration lives in $XDG_CONFIG_HOME/presubmit-gate
(default: ~/.config/presubmit-gate).

Reference: https://specifications.freedesktop.org/basedir-spec/latest/
"""

from __future__ import annotations

import os
from pathlib import Path

XDG_CONFIG_HOME = "XDG_CONFIG_HOME"

# Application name used in XDG directories
APP_NAME = "presubmit-gate"


def get_config_home() -> Path:
    """Get the XDG config home directory.

    Returns:
        Path from $XDG_CONFIG_HOME or ~/.config if not set
    """
    xdg_config = os.environ.get(XDG_CONFIG_HOME)
    if xdg_config:
        return Path(xdg_config).expanduser()
    return Path.home() / ".config"


def get_config_dir() -> Path:
    """Get the application config directory."""
    return get_config_home() / APP_NAME


def get_default_config_path() -> Path:
    """Get the default config file path.

    Returns:
        Path to config.yaml in the config directory
    """
    return get_config_dir() / "config.yaml"
