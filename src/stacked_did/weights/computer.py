"""Corrective stack weights -- Wing, Freedman & Hollingsworth (2024).

Within each event time, sub-experiments contribute different numbers of
control rows relative to their treated rows. Control rows of sub-experiment a
at event time e are rescaled by

    (N_treat[a, e] / N_treat[e]) / (N_control[a, e] / N_control[e])

so each sub-experiment's control group carries the same share of the stack's
controls as its treated group carries of the stack's treated rows. Treated
rows keep weight 1.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .._types import StackConfig
from .._validation import require_columns
from ..exceptions import DegenerateWeightError, EmptyResultError, SchemaError

logger = logging.getLogger(__name__)

STAGE = "WeightComputer"


class WeightComputer:
    """Compute per-row corrective weights on a stacked panel.

    Parameters
    ----------
    config : StackConfig, optional
        Column name mapping. ``treated_col``, ``event_time_col`` and
        ``sub_exp_col`` are read; ``weight_col`` is written.

    Example
    -------
    >>> df_stack = StackAssembler(df, config=config, kappa_pre=3, kappa_post=2).build()
    >>> df_weighted = WeightComputer(config).compute(df_stack)
    """

    def __init__(self, config: StackConfig | None = None):
        self.config = config or StackConfig()

    def shares(self, stack: pd.DataFrame) -> pd.DataFrame:
        """Aggregate counts, shares and control weight per sub-experiment x event time.

        Stack-level denominators are computed over the entire stack before
        any sub-experiment share is derived.

        Parameters
        ----------
        stack : pd.DataFrame
            Stacked panel.

        Returns
        -------
        pd.DataFrame
            One row per (sub_exp, event_time) with columns sub_n, sub_treat_n,
            sub_control_n, stack_n, stack_treat_n, stack_control_n,
            sub_treat_share, sub_control_share and control_weight (NaN where
            the key has no control rows).

        Raises
        ------
        DegenerateWeightError
            If an event time has no treated or no control rows in the stack,
            or a key with control rows gets a zero control share.
        """
        c = self.config
        require_columns(stack, [c.treated_col, c.event_time_col, c.sub_exp_col], stage=STAGE)
        if stack.empty:
            raise EmptyResultError(f"{STAGE}: stack is empty")

        treated = stack[c.treated_col]
        if not treated.isin([0, 1]).all():
            raise SchemaError(
                f"{STAGE}: {c.treated_col} must be 0/1, "
                f"found {sorted(treated.dropna().unique().tolist())}",
                stage=STAGE,
            )

        flags = pd.DataFrame({
            c.sub_exp_col: stack[c.sub_exp_col].to_numpy(),
            c.event_time_col: stack[c.event_time_col].to_numpy(),
            "is_treat": (treated == 1).astype(int).to_numpy(),
        })
        flags["is_control"] = 1 - flags["is_treat"]

        # Read phase 1: whole-stack totals per event time
        stack_totals = (
            flags.groupby(c.event_time_col)
            .agg(
                stack_n=("is_treat", "size"),
                stack_treat_n=("is_treat", "sum"),
                stack_control_n=("is_control", "sum"),
            )
            .reset_index()
        )
        self._check_stack_totals(stack_totals)

        # Read phase 2: per sub-experiment x event time
        sub_totals = (
            flags.groupby([c.sub_exp_col, c.event_time_col])
            .agg(
                sub_n=("is_treat", "size"),
                sub_treat_n=("is_treat", "sum"),
                sub_control_n=("is_control", "sum"),
            )
            .reset_index()
        )

        shares = sub_totals.merge(
            stack_totals, on=c.event_time_col, how="left", validate="many_to_one"
        )
        shares["sub_treat_share"] = shares["sub_treat_n"] / shares["stack_treat_n"]
        shares["sub_control_share"] = shares["sub_control_n"] / shares["stack_control_n"]
        self._check_shares(shares)

        has_controls = shares["sub_control_n"] > 0
        shares["control_weight"] = np.nan
        shares.loc[has_controls, "control_weight"] = (
            shares.loc[has_controls, "sub_treat_share"]
            / shares.loc[has_controls, "sub_control_share"]
        )

        orphan = has_controls & (shares["sub_treat_n"] == 0)
        if orphan.any():
            keys = list(
                shares.loc[orphan, [c.sub_exp_col, c.event_time_col]].itertuples(index=False, name=None)
            )
            logger.warning(
                "Control rows without treated rows get weight 0 at (%s, %s): %s",
                c.sub_exp_col,
                c.event_time_col,
                keys,
            )

        return shares

    def compute(self, stack: pd.DataFrame) -> pd.DataFrame:
        """Append the corrective weight column to a copy of the stack.

        Parameters
        ----------
        stack : pd.DataFrame
            Stacked panel from ``StackAssembler.build()``.

        Returns
        -------
        pd.DataFrame
            Same rows in the same order, with ``weight_col`` set to 1.0 for
            treated rows and sub_treat_share / sub_control_share for controls.
            An existing ``weight_col`` is replaced.
        """
        c = self.config
        shares = self.shares(stack)

        keys = [c.sub_exp_col, c.event_time_col]
        lookup = stack[keys].merge(
            shares[keys + ["control_weight"]], on=keys, how="left", validate="many_to_one"
        )

        df = stack.drop(columns=[c.weight_col], errors="ignore")
        df[c.weight_col] = np.where(
            df[c.treated_col].to_numpy() == 1,
            1.0,
            lookup["control_weight"].to_numpy(dtype=float),
        )

        controls = df.loc[df[c.treated_col] == 0, c.weight_col]
        logger.info(
            "Stack weights computed: %s treated rows at 1.0, %s control rows in [%.4f, %.4f]",
            f"{len(df) - len(controls):,}",
            f"{len(controls):,}",
            controls.min() if len(controls) else float("nan"),
            controls.max() if len(controls) else float("nan"),
        )
        return df

    def _check_stack_totals(self, stack_totals: pd.DataFrame) -> None:
        c = self.config
        for col, label in (("stack_treat_n", "treated"), ("stack_control_n", "control")):
            empty = stack_totals[stack_totals[col] == 0]
            if len(empty):
                e = int(empty[c.event_time_col].iloc[0])
                raise DegenerateWeightError(
                    f"{STAGE}: no {label} rows in the stack at "
                    f"{c.event_time_col}={e}; share denominator is zero",
                    stage=STAGE,
                    event_time=e,
                )

    def _check_shares(self, shares: pd.DataFrame) -> None:
        c = self.config
        bad = (shares["sub_control_n"] > 0) & ~(shares["sub_control_share"] > 0)
        if bad.any():
            row = shares[bad].iloc[0]
            raise DegenerateWeightError(
                f"{STAGE}: {c.sub_exp_col}={row[c.sub_exp_col]}, "
                f"{c.event_time_col}={row[c.event_time_col]} has "
                f"{int(row['sub_control_n'])} control rows but a zero control share",
                stage=STAGE,
                sub_exp=int(row[c.sub_exp_col]),
                event_time=int(row[c.event_time_col]),
            )
