"""Stacked Panel Assembler -- Cengiz et al. (2019), Wing et al. (2024).

Builds one clean sub-experiment per adoption cohort, stacks them, and keeps
only sub-experiments whose full event window is observed.

Reference:
    Wing, C., Freedman, S. M., & Hollingsworth, A. (2024). Stacked
    difference-in-differences. NBER Working Paper 32054.
"""

from __future__ import annotations

import logging

import pandas as pd

from .._types import StackConfig
from ..exceptions import EmptyResultError, NoEventsError
from .sub_experiment import SubExperimentBuilder

logger = logging.getLogger(__name__)


class StackAssembler:
    """Assemble the stacked dataset from all feasible sub-experiments.

    Parameters
    ----------
    df : pd.DataFrame
        Long panel with ``unit_col``, ``time_col`` and ``adoption_col``.
    config : StackConfig, optional
        Column name mapping.
    kappa_pre : int
        Number of pre-adoption periods in the event window (default: 3).
    kappa_post : int
        Number of post-adoption periods in the event window (default: 3).
    events : list[int], optional
        Adoption times to build sub-experiments for. If None, every distinct
        non-missing adoption time in the data is used.

    Example
    -------
    >>> config = StackConfig(unit_col="state", time_col="year", adoption_col="adopt_year")
    >>> assembler = StackAssembler(df, config=config, kappa_pre=3, kappa_post=2)
    >>> df_stack = assembler.build()
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: StackConfig | None = None,
        kappa_pre: int = 3,
        kappa_post: int = 3,
        events: list[int] | None = None,
    ):
        self._builder = SubExperimentBuilder(df, config, kappa_pre=kappa_pre, kappa_post=kappa_post)
        self.config = self._builder.config
        self.kappa_pre = self._builder.kappa_pre
        self.kappa_post = self._builder.kappa_post
        self.events = sorted(int(e) for e in events) if events is not None else self._builder.events
        self.infeasible_events: list[int] = []
        self._panel: pd.DataFrame | None = None

        logger.info(
            "Event window: -%s to +%s, panel range: %s-%s, events: %s",
            self.kappa_pre,
            self.kappa_post,
            self._builder.time_min,
            self._builder.time_max,
            self.events,
        )

    def build(self) -> pd.DataFrame:
        """Build the stacked panel.

        Returns
        -------
        pd.DataFrame
            Concatenation of all feasible sub-experiments (see
            ``SubExperimentBuilder.build`` for the added columns), plus
            ``unit_sub_exp_id`` = unit + "_" + sub_exp for sub-experiment
            specific unit fixed effects.

        Raises
        ------
        NoEventsError
            If the panel has no adoption events.
        EmptyResultError
            If every sub-experiment is infeasible.
        """
        if not self.events:
            raise NoEventsError(
                "No adoption events found: every unit has a missing "
                f"{self.config.adoption_col}."
            )

        c = self.config

        # Feasibility is a property of the whole sub-experiment: an event whose
        # window leaves the panel is dropped without building it
        feasible_events = [g for g in self.events if self._builder.is_feasible(g)]
        self.infeasible_events = [g for g in self.events if g not in feasible_events]
        if self.infeasible_events:
            logger.info("Dropping infeasible sub-experiments %s", self.infeasible_events)

        if not feasible_events:
            raise EmptyResultError(
                f"No feasible sub-experiments. Events {self.infeasible_events} "
                f"cannot observe the window [-{self.kappa_pre}, +{self.kappa_post}] "
                f"inside {self._builder.time_min}-{self._builder.time_max}."
            )

        df_stacked = pd.concat(
            [self._builder.build(g) for g in feasible_events], ignore_index=True
        )
        df_stacked = df_stacked.loc[df_stacked[c.feasible_col] == 1].reset_index(drop=True)

        df_stacked["unit_sub_exp_id"] = (
            df_stacked[c.unit_col].astype(str) + "_" + df_stacked[c.sub_exp_col].astype(str)
        )

        self._panel = df_stacked

        logger.info("Stacked panel built")
        logger.info("  Total observations: %s", f"{len(df_stacked):,}")
        logger.info("  Sub-experiments: %s", df_stacked[c.sub_exp_col].nunique())
        logger.info("  Unique units: %s", f"{df_stacked[c.unit_col].nunique():,}")
        for ct, cnt in df_stacked["control_type"].value_counts().items():
            logger.info("  %s: %s", ct, f"{cnt:,}")

        return df_stacked

    @property
    def panel(self) -> pd.DataFrame:
        """Lazily build and cache the stacked panel."""
        if self._panel is None:
            self._panel = self.build()
        return self._panel

    def summary(self) -> pd.DataFrame:
        """Return stack summary statistics.

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with n_obs, n_units, n_sub_experiments,
            time range, and the infeasible events that were dropped.
        """
        c = self.config
        df = self.panel

        return pd.DataFrame([{
            "n_obs": len(df),
            "n_units": df[c.unit_col].nunique(),
            "n_sub_experiments": df[c.sub_exp_col].nunique(),
            "time_min": df[c.time_col].min(),
            "time_max": df[c.time_col].max(),
            "n_infeasible": len(self.infeasible_events),
        }])

    def sub_experiment_summary(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Per sub-experiment unit counts and event window.

        Parameters
        ----------
        df : pd.DataFrame, optional
            Stacked panel. If None, uses cached panel.

        Returns
        -------
        pd.DataFrame
            Indexed by sub-experiment with n_units, n_obs, n_treated_units,
            n_control_units and event_window.
        """
        if df is None:
            df = self.panel

        c = self.config

        summary = (
            df.groupby(c.sub_exp_col)
            .agg(
                n_units=(c.unit_col, "nunique"),
                n_obs=(c.unit_col, "size"),
                event_window=(c.event_time_col, lambda x: f"[{int(x.min())}, {int(x.max())}]"),
            )
        )

        by_group = df.groupby([c.sub_exp_col, c.treated_col])[c.unit_col].nunique().unstack(fill_value=0)
        treated_units = by_group.get(1, pd.Series(0, index=by_group.index)).rename("n_treated_units")
        control_units = by_group.get(0, pd.Series(0, index=by_group.index)).rename("n_control_units")

        return summary.join(treated_units).join(control_units)

    def merge_outcomes(
        self,
        df_outcomes: pd.DataFrame,
        outcome_cols: list[str] | None = None,
    ) -> pd.DataFrame:
        """Merge outcome data onto the stacked panel.

        Each (unit, time) outcome is repeated in every sub-experiment the
        observation belongs to.

        Parameters
        ----------
        df_outcomes : pd.DataFrame
            Must contain ``unit_col`` and ``time_col`` plus outcome columns.
        outcome_cols : list[str], optional
            If provided, only these outcome columns are kept.

        Returns
        -------
        pd.DataFrame
            Stacked panel with outcome columns appended via left join.
        """
        c = self.config
        df_panel = self.panel.copy()

        df_out = df_outcomes.copy()
        df_out[c.unit_col] = df_out[c.unit_col].astype(str)
        df_out[c.time_col] = pd.to_numeric(df_out[c.time_col], errors="coerce")

        if outcome_cols:
            keep = [c.unit_col, c.time_col] + outcome_cols
            df_out = df_out[[col for col in keep if col in df_out.columns]]

        merged = df_panel.merge(
            df_out, on=[c.unit_col, c.time_col], how="left", validate="many_to_one"
        )
        logger.info("Merged with outcomes: %s rows", f"{len(merged):,}")
        return merged
