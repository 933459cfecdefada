"""Locate, read and validate the presubmit job list.

A config is looked up from --config, then $PRESUBMIT_GATE_CONFIG, then
./presubmits.yaml, then $XDG_CONFIG_HOME/presubmit-gate/config.yaml.
${VAR} references in any string value (branch lists, change patterns,
triggers) are filled from the environment before validation.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from presubmit_gate.config.schema import Config
from presubmit_gate.paths import get_default_config_path

CONFIG_ENV_VAR = "PRESUBMIT_GATE_CONFIG"
LOCAL_CONFIG_NAME = "presubmits.yaml"

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


class ConfigError(Exception):
    """The presubmit config couldn't be loaded.

    `path` is the offending file, when one was found.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    pass


class ConfigValidationError(ConfigError):
    """Presubmit definitions were rejected by the schema.

    `validation_errors` keeps pydantic's error dicts for callers that want
    to point at individual jobs.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.validation_errors = validation_errors or []
        super().__init__(message, path)


class EnvironmentVariableError(ConfigError):
    def __init__(self, var_name: str, path: Path | None = None) -> None:
        self.var_name = var_name
        super().__init__(f"Presubmit config references ${{{var_name}}}, which is unset", path)


def expand_env_vars(value: Any, *, strict: bool = True) -> Any:
    """Fill ${VAR} references throughout a parsed YAML document.

    With strict=False an unset variable's reference is kept verbatim, so
    a regex like `^${PREFIX}/` survives for the schema to report on.
    """

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in os.environ:
            return os.environ[name]
        if strict:
            raise EnvironmentVariableError(name)
        return match.group(0)

    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(substitute, value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item, strict=strict) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item, strict=strict) for item in value]
    return value


def discover_config_path(explicit_path: str | Path | None = None) -> Path:
    """Return the first presubmit config that exists.

    An explicit path must exist; the fallback locations are tried in order.
    """
    if explicit_path:
        path = Path(explicit_path).expanduser().resolve()
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}", path)
        return path

    candidates = [Path.cwd() / LOCAL_CONFIG_NAME, get_default_config_path()]
    if os.environ.get(CONFIG_ENV_VAR):
        candidates.insert(0, Path(os.environ[CONFIG_ENV_VAR]).expanduser().resolve())

    found = next((p for p in candidates if p.exists()), None)
    if found is None:
        searched = "".join(f"\n  - {p}" for p in candidates)
        raise ConfigNotFoundError(f"No presubmit config found. Searched locations:{searched}")
    return found


def _read_document(path: Path) -> dict[str, Any]:
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        kind = type(document).__name__
        raise ConfigError(f"Expected a YAML mapping with a presubmits key, got {kind}", path)
    return document


def _describe(errors: list[dict[str, Any]]) -> str:
    lines = [f"Invalid presubmit config, {len(errors)} problem(s):"]
    lines += [f"  {'.'.join(map(str, e['loc'])) or '<root>'}: {e['msg']}" for e in errors]
    return "\n".join(lines)


def load_config(path: str | Path | None = None, *, expand_env: bool = True) -> Config:
    """Load the presubmit job list.

    Raises:
        ConfigNotFoundError: Nothing at the explicit path or any fallback.
        ConfigError: The file is unreadable or not a YAML mapping.
        EnvironmentVariableError: A ${VAR} reference is unset.
        ConfigValidationError: A presubmit definition is invalid, or two
            share a name.
    """
    config_path = discover_config_path(path)
    document = _read_document(config_path)

    if expand_env:
        try:
            document = expand_env_vars(document)
        except EnvironmentVariableError as e:
            e.path = config_path
            raise

    try:
        return Config.model_validate(document)
    except ValidationError as e:
        errors = [dict(err) for err in e.errors()]
        raise ConfigValidationError(_describe(errors), config_path, errors) from e
