"""Visualization functions for stacked panels and their weights."""

from ._style import apply_style
from .stacked import plot_stacked_event_study, plot_weight_heatmap

__all__ = [
    "apply_style",
    "plot_stacked_event_study",
    "plot_weight_heatmap",
]
