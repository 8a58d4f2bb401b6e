"""stacked-did: Build stacked, weighted datasets for difference-in-differences estimation."""

from ._types import StackConfig
from .exceptions import (
    DegenerateWeightError,
    EmptyResultError,
    InvalidWindowError,
    NoEventsError,
    SchemaError,
    StackedDiDError,
)
from .panels import StackAssembler, SubExperimentBuilder
from .pipeline import stack_panel
from .weights import WeightComputer

__all__ = [
    "StackConfig",
    "SubExperimentBuilder",
    "StackAssembler",
    "WeightComputer",
    "stack_panel",
    "StackedDiDError",
    "SchemaError",
    "InvalidWindowError",
    "EmptyResultError",
    "NoEventsError",
    "DegenerateWeightError",
]

__version__ = "0.1.0"
