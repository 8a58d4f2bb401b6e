"""Export utilities for the stacked, weighted dataset."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def _nullable_to_float(df: pd.DataFrame) -> pd.DataFrame:
    """Convert nullable integer/boolean columns (e.g. adoption time) to float."""
    nullable = [
        col for col in df.columns
        if isinstance(df[col].dtype, pd.api.extensions.ExtensionDtype)
        and df[col].dtype.kind in "iub"
    ]
    if nullable:
        logger.info("Converting nullable columns to float for export: %s", nullable)
        df = df.astype({col: "float64" for col in nullable})
    return df


def to_parquet(df: pd.DataFrame, path: str | Path, **kwargs) -> None:
    """Export stack to parquet.

    Parameters
    ----------
    df : pd.DataFrame
        Stacked panel.
    path : str or Path
        Output file path.
    **kwargs
        Passed to ``DataFrame.to_parquet()``.
    """
    df.to_parquet(path, index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df):,}", path)


def to_csv(df: pd.DataFrame, path: str | Path, **kwargs) -> None:
    """Export stack to CSV. Never-adopted units get an empty adoption field.

    Parameters
    ----------
    df : pd.DataFrame
        Stacked panel.
    path : str or Path
        Output file path.
    **kwargs
        Passed to ``DataFrame.to_csv()``.
    """
    df.to_csv(path, index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df):,}", path)


def to_stata(df: pd.DataFrame, path: str | Path, **kwargs) -> None:
    """Export stack to Stata .dta, converting nullable columns to float.

    Parameters
    ----------
    df : pd.DataFrame
        Stacked panel.
    path : str or Path
        Output file path.
    **kwargs
        Passed to ``DataFrame.to_stata()``.
    """
    df_clean = _nullable_to_float(df.copy())

    # Stata column names max 32 chars
    rename = {}
    for col in df_clean.columns:
        if len(col) > 32:
            rename[col] = col[:32]
    if rename:
        logger.info("Truncating column names for Stata: %s", rename)
        df_clean = df_clean.rename(columns=rename)

    df_clean.to_stata(path, write_index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df_clean):,}", path)
