"""One-call pipeline: panel -> stacked, weighted dataset."""

from __future__ import annotations

import pandas as pd

from ._types import StackConfig
from .panels import StackAssembler
from .weights import WeightComputer


def stack_panel(
    df: pd.DataFrame,
    config: StackConfig | None = None,
    kappa_pre: int = 3,
    kappa_post: int = 3,
    events: list[int] | None = None,
) -> pd.DataFrame:
    """Assemble the feasible sub-experiments and attach corrective weights.

    Equivalent to ``WeightComputer(config).compute(StackAssembler(...).build())``.

    Example
    -------
    >>> config = StackConfig(unit_col="state", time_col="year", adoption_col="adopt_year")
    >>> df_stack = stack_panel(df, config=config, kappa_pre=3, kappa_post=2)
    """
    assembler = StackAssembler(df, config, kappa_pre=kappa_pre, kappa_post=kappa_post, events=events)
    return WeightComputer(assembler.config).compute(assembler.build())
