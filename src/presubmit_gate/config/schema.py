"""Pydantic schema models for configuration.

- Config: Top-level configuration container
- Presubmit: job definitions (see presubmit_gate.jobs.presubmit)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from presubmit_gate.jobs.presubmit import Presubmit


class Config(BaseModel):
    """Top-level configuration loaded from YAML.

    Attributes:
        version: Schema version (must be 1)
        presubmits: Presubmit job definitions, in evaluation order
    """

    model_config = ConfigDict(extra="forbid")

    version: Literal[1]
    presubmits: list[Presubmit] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_presubmit_names(self) -> Config:
        """Ensure all presubmit names are unique."""
        names = [presubmit.name for presubmit in self.presubmits]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate presubmit names found: {duplicates}"
            raise ValueError(msg)
        return self

    def get_presubmit(self, name: str) -> Presubmit | None:
        """Find a presubmit by name."""
        for presubmit in self.presubmits:
            if presubmit.name == name:
                return presubmit
        return None
