"""Diagnostics for stacked panel composition and weighting."""

from .composition import StackDiagnostics

__all__ = ["StackDiagnostics"]
