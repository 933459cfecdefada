"""Filter decision models."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class NoMatch(BaseModel):
    """The filter did not select the job. Carries no run flags."""

    model_config = ConfigDict(frozen=True)

    matches: ClassVar[bool] = False

    def as_tuple(self) -> tuple[bool, bool, bool]:
        """Return the (matches, forced, default_behavior) triple."""
        return False, False, False


class Matched(BaseModel):
    """The filter selected the job."""

    model_config = ConfigDict(frozen=True)

    matches: ClassVar[bool] = True

    forced: bool = Field(..., description="Run regardless of the job's own gating")
    default_behavior: bool = Field(
        ..., description="Result when none of the job's conditions decide"
    )

    def as_tuple(self) -> tuple[bool, bool, bool]:
        """Return the (matches, forced, default_behavior) triple."""
        return True, self.forced, self.default_behavior


Decision = NoMatch | Matched

NO_MATCH = NoMatch()
