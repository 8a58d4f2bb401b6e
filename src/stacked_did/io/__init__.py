"""Export utilities for stacked panels."""

from .export import to_csv, to_parquet, to_stata

__all__ = ["to_parquet", "to_csv", "to_stata"]
