"""Regression inputs for the stacked event-study specification."""

from __future__ import annotations

import pandas as pd

from .._types import StackConfig
from .._validation import require_columns


def _term_name(prefix: str, event_time: int) -> str:
    if event_time < 0:
        return f"{prefix}_m{-event_time}"
    if event_time > 0:
        return f"{prefix}_p{event_time}"
    return f"{prefix}_0"


def event_terms(
    stack: pd.DataFrame,
    config: StackConfig | None = None,
    reference: int = -1,
    prefix: str = "treat_x_et",
) -> list[str]:
    """Names of the treat x event-time interaction columns, reference omitted."""
    c = config or StackConfig()
    require_columns(stack, [c.event_time_col], stage="event_terms")
    times = sorted(int(e) for e in stack[c.event_time_col].unique())
    return [_term_name(prefix, e) for e in times if e != reference]


def add_event_dummies(
    stack: pd.DataFrame,
    config: StackConfig | None = None,
    reference: int = -1,
    prefix: str = "treat_x_et",
) -> pd.DataFrame:
    """Append one treat x event-time indicator per non-reference event time.

    Parameters
    ----------
    stack : pd.DataFrame
        Stacked panel with treated and event-time columns.
    config : StackConfig, optional
        Column name mapping.
    reference : int
        Omitted event time (default: -1, the period before adoption).
    prefix : str
        Column name prefix. Negative offsets are written ``m<k>``, positive
        ones ``p<k>``, e.g. ``treat_x_et_m3``, ``treat_x_et_0``, ``treat_x_et_p2``.

    Returns
    -------
    pd.DataFrame
        Copy of ``stack`` with the indicator columns (0/1) appended.
    """
    c = config or StackConfig()
    require_columns(stack, [c.treated_col, c.event_time_col], stage="add_event_dummies")

    df = stack.copy()
    treated = df[c.treated_col] == 1
    for e in sorted(int(e) for e in df[c.event_time_col].unique()):
        if e == reference:
            continue
        df[_term_name(prefix, e)] = (treated & (df[c.event_time_col] == e)).astype(int)
    return df


def event_study_formula(
    stack: pd.DataFrame,
    outcome: str,
    config: StackConfig | None = None,
    reference: int = -1,
    prefix: str = "treat_x_et",
) -> str:
    """Fixest-style formula for the stacked event study.

    The outcome is regressed on the interaction dummies from
    ``add_event_dummies`` with treat and event-time fixed effects. The caller
    is expected to weight by ``weight_col`` and cluster on ``unit_col``.

    Example
    -------
    >>> event_study_formula(df_stack, "uninsured_rate")
    'uninsured_rate ~ treat_x_et_m3 + treat_x_et_m2 + treat_x_et_0 + ... | treat + event_time'
    """
    c = config or StackConfig()
    terms = event_terms(stack, c, reference=reference, prefix=prefix)
    rhs = " + ".join(terms) if terms else "1"
    return f"{outcome} ~ {rhs} | {c.treated_col} + {c.event_time_col}"
