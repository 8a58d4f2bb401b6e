"""Input validation shared by builders and analyzers."""

from __future__ import annotations

import numbers

import pandas as pd

from .exceptions import InvalidWindowError, SchemaError


def require_columns(df: pd.DataFrame, columns: list[str], stage: str) -> None:
    """Raise ``SchemaError`` if any of ``columns`` is absent from ``df``."""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise SchemaError(
            f"{stage}: missing required columns: {missing}. "
            f"Available: {sorted(str(col) for col in df.columns)}",
            stage=stage,
            missing=missing,
        )


def check_window(kappa_pre, kappa_post) -> tuple[int, int]:
    """Validate event window half-widths and return them as ints."""
    for name, value in (("kappa_pre", kappa_pre), ("kappa_post", kappa_post)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidWindowError(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise InvalidWindowError(f"{name} must be >= 0, got {value}")
    return int(kappa_pre), int(kappa_post)
