"""Error types raised by the stacking pipeline."""

from __future__ import annotations


class StackedDiDError(ValueError):
    """Base class for all stacked-did errors."""


class SchemaError(StackedDiDError):
    """A required column is missing or the panel breaks a structural invariant."""

    def __init__(self, message: str, stage: str | None = None, missing: list[str] | None = None):
        super().__init__(message)
        self.stage = stage
        self.missing = missing or []


class InvalidWindowError(StackedDiDError):
    """Pre/post window widths are negative or not integers."""


class EmptyResultError(StackedDiDError):
    """Filtering left no rows to work with."""


class NoEventsError(EmptyResultError):
    """The panel contains no non-missing adoption times."""


class DegenerateWeightError(StackedDiDError):
    """A share denominator is zero, so the corrective weight is undefined.

    Attributes
    ----------
    stage : str
        Pipeline stage that detected the problem.
    sub_exp : int or None
        Offending sub-experiment, if the problem is specific to one.
    event_time : int or None
        Offending event time.
    """

    def __init__(
        self,
        message: str,
        stage: str = "WeightComputer",
        sub_exp: int | None = None,
        event_time: int | None = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.sub_exp = sub_exp
        self.event_time = event_time
