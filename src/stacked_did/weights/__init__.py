"""Corrective sample weights for stacked regressions."""

from .computer import WeightComputer

__all__ = ["WeightComputer"]
