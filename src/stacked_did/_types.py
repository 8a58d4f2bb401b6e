"""Shared types and configuration for stacked-did."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StackConfig:
    """Column name mapping for panel and stacked data.

    Every builder, weight computer and diagnostic takes this as its
    configuration argument. Create one and pass it through the pipeline.

    Parameters
    ----------
    unit_col : str
        Column name for the unit identifier (e.g., state, county, firm).
    time_col : str
        Column name for the integer time period (e.g., year).
    adoption_col : str
        Column name for the period in which the unit's treatment begins.
        Missing values mark never-adopted units.
    outcome_col : str, optional
        Outcome column. Only validated when given.
    treated_col : str
        Output column flagging the treated cohort of a sub-experiment.
    post_col : str
        Output column flagging periods at or after the focal adoption time.
    event_time_col : str
        Output column with time relative to the focal adoption time.
    feasible_col : str
        Output column flagging sub-experiments whose window fits the panel.
    sub_exp_col : str
        Output column identifying the sub-experiment (its focal adoption time).
    weight_col : str
        Output column holding the corrective stack weight.
    never_value : int, optional
        Sentinel in ``adoption_col`` that also means never-adopted (e.g. 0).
        Converted to a missing value on input.

    Example
    -------
    >>> config = StackConfig(unit_col="state", time_col="year", adoption_col="adopt_year")
    """

    unit_col: str = "unit_id"
    time_col: str = "time"
    adoption_col: str = "adoption_time"
    outcome_col: str | None = None
    treated_col: str = "treat"
    post_col: str = "post"
    event_time_col: str = "event_time"
    feasible_col: str = "feasible"
    sub_exp_col: str = "sub_exp"
    weight_col: str = "stack_weight"
    never_value: int | None = None
