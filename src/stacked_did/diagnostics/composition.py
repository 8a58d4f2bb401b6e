"""Composition and weighting diagnostics for a stacked panel.

Answers the questions worth checking before handing the stack to a
regression:

1. **Composition** -- How many treated and control rows does each
   sub-experiment contribute at each event time?
2. **Share conservation** -- Do sub-experiment shares partition the stack
   at every event time?
3. **Weighted means** -- What do weighted treated and control outcomes look
   like around adoption, and what raw 2x2 contrast do they imply?
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from .._types import StackConfig
from .._validation import require_columns
from ..weights import WeightComputer


class StackDiagnostics:
    """Run descriptive diagnostics on a stacked (optionally weighted) panel.

    Parameters
    ----------
    config : StackConfig, optional
        Column name mapping.

    Example
    -------
    >>> from stacked_did.diagnostics import StackDiagnostics
    >>> diag = StackDiagnostics(config=config)
    >>> diag.check_shares(df_stack)
    >>> diag.pre_post_means(df_weighted, outcome="uninsured_rate")
    """

    def __init__(self, config: StackConfig | None = None):
        self.config = config or StackConfig()

    def composition(self, stack: pd.DataFrame) -> pd.DataFrame:
        """Treated and control row counts per sub-experiment and event time.

        Returns
        -------
        pd.DataFrame
            Columns: sub_exp, event_time, n_treated, n_control, n_obs.
        """
        c = self.config
        require_columns(
            stack, [c.sub_exp_col, c.event_time_col, c.treated_col], stage="StackDiagnostics"
        )
        counts = (
            stack.groupby([c.sub_exp_col, c.event_time_col])[c.treated_col]
            .agg(n_treated="sum", n_obs="size")
            .reset_index()
        )
        counts["n_treated"] = counts["n_treated"].astype(int)
        counts["n_control"] = counts["n_obs"] - counts["n_treated"]
        return counts[[c.sub_exp_col, c.event_time_col, "n_treated", "n_control", "n_obs"]]

    def check_shares(self, stack: pd.DataFrame, tol: float = 1e-9) -> pd.DataFrame:
        """Verify that sub-experiment shares sum to one at every event time.

        Returns
        -------
        pd.DataFrame
            One row per event time with treat_share_sum, control_share_sum,
            and ``ok`` (both sums within ``tol`` of 1).
        """
        c = self.config
        shares = WeightComputer(c).shares(stack)
        sums = (
            shares.groupby(c.event_time_col)
            .agg(
                treat_share_sum=("sub_treat_share", "sum"),
                control_share_sum=("sub_control_share", "sum"),
            )
            .reset_index()
        )
        sums["ok"] = (
            (sums["treat_share_sum"] - 1).abs().le(tol)
            & (sums["control_share_sum"] - 1).abs().le(tol)
        )
        return sums

    def weighted_means(self, stack: pd.DataFrame, outcome: str) -> pd.DataFrame:
        """Mean outcome by event time and treatment status, with and without weights.

        Parameters
        ----------
        stack : pd.DataFrame
            Weighted stack (output of ``WeightComputer.compute``).
        outcome : str
            Outcome column.

        Returns
        -------
        pd.DataFrame
            Columns: event_time, treat, n_obs, mean, sem, weighted_mean,
            weighted_sem. The weighted standard error uses the weighted
            variance over the Kish effective sample size (sum w)^2 / sum w^2.
        """
        c = self.config
        require_columns(
            stack,
            [c.event_time_col, c.treated_col, c.weight_col, outcome],
            stage="StackDiagnostics",
        )
        df = stack[[c.event_time_col, c.treated_col, c.weight_col, outcome]].dropna(subset=[outcome])
        w = df[c.weight_col]
        df = df.assign(_wy=w * df[outcome], _wyy=w * df[outcome] ** 2, _ww=w**2)

        stats = (
            df.groupby([c.event_time_col, c.treated_col])
            .agg(
                n_obs=(outcome, "size"),
                mean=(outcome, "mean"),
                sem=(outcome, "sem"),
                sum_w=(c.weight_col, "sum"),
                sum_wy=("_wy", "sum"),
                sum_wyy=("_wyy", "sum"),
                sum_ww=("_ww", "sum"),
            )
            .reset_index()
        )
        stats["weighted_mean"] = (stats["sum_wy"] / stats["sum_w"]).where(stats["sum_w"] > 0)
        weighted_var = (stats["sum_wyy"] / stats["sum_w"] - stats["weighted_mean"] ** 2).clip(lower=0)
        n_eff = stats["sum_w"] ** 2 / stats["sum_ww"]
        stats["weighted_sem"] = np.sqrt(weighted_var / n_eff).where(n_eff > 1)
        return stats.drop(columns=["sum_w", "sum_wy", "sum_wyy", "sum_ww"])

    def pre_post_means(self, stack: pd.DataFrame, outcome: str) -> dict[str, Any]:
        """Weighted pre/post means for treated and control, and the raw 2x2 contrast.

        Descriptive only: no standard errors, no fixed effects.

        Returns
        -------
        dict
            Keys: ``means`` (DataFrame indexed by group with pre_mean,
            post_mean, diff, pre_obs, post_obs) and ``did`` (float).
        """
        c = self.config
        require_columns(
            stack,
            [c.treated_col, c.post_col, c.weight_col, outcome],
            stage="StackDiagnostics",
        )
        df = stack.dropna(subset=[outcome])

        rows = []
        for label, value in (("treated", 1), ("control", 0)):
            group = df[df[c.treated_col] == value]
            pre = group[group[c.post_col] == 0]
            post = group[group[c.post_col] == 1]
            pre_mean = _weighted_mean(pre[outcome], pre[c.weight_col])
            post_mean = _weighted_mean(post[outcome], post[c.weight_col])
            rows.append({
                "group": label,
                "pre_mean": pre_mean,
                "post_mean": post_mean,
                "diff": post_mean - pre_mean,
                "pre_obs": len(pre),
                "post_obs": len(post),
            })

        means = pd.DataFrame(rows).set_index("group")
        did = means.loc["treated", "diff"] - means.loc["control", "diff"]
        return {"means": means, "did": float(did)}

    def print_summary(self, stack: pd.DataFrame, outcome: str | None = None) -> None:
        """Print composition, share checks and (optionally) the 2x2 contrast."""
        c = self.config

        comp = self.composition(stack)
        print("Stack composition")
        print("=" * 60)
        per_sub = comp.groupby(c.sub_exp_col)[["n_treated", "n_control"]].sum()
        print(f"  {'Sub-exp':>8s}  {'Treated':>9s}  {'Control':>9s}")
        for sub_exp, row in per_sub.iterrows():
            print(f"  {sub_exp!s:>8s}  {row['n_treated']:>9,}  {row['n_control']:>9,}")
        print()

        sums = self.check_shares(stack)
        print("Share conservation by event time")
        print("=" * 60)
        for _, row in sums.iterrows():
            flag = "ok" if row["ok"] else "FAIL"
            print(
                f"  {c.event_time_col}={int(row[c.event_time_col]):>+3d}  "
                f"treat={row['treat_share_sum']:.6f}  "
                f"control={row['control_share_sum']:.6f}  {flag}"
            )
        print()

        if outcome is not None:
            res = self.pre_post_means(stack, outcome)
            print(f"Weighted pre/post means: {outcome}")
            print("=" * 60)
            for group, row in res["means"].iterrows():
                print(
                    f"  {group:<8s}  pre={row['pre_mean']:>9.4f}  "
                    f"post={row['post_mean']:>9.4f}  diff={row['diff']:>+9.4f}"
                )
            print(f"  Raw 2x2 DiD: {res['did']:+.4f}")
            print()


def _weighted_mean(values: pd.Series, weights: pd.Series) -> float:
    total = weights.sum()
    if len(values) == 0 or total <= 0:
        return np.nan
    return float(np.average(values, weights=weights))
