"""Stacked event-study and weight visualization functions."""

from __future__ import annotations

import pandas as pd

from .._types import StackConfig
from ..diagnostics import StackDiagnostics
from ..weights import WeightComputer
from ._style import COLORS, get_z, style_axis_labels, style_title


def plot_stacked_event_study(
    stack: pd.DataFrame,
    outcome: str,
    config: StackConfig | None = None,
    ci: float = 0.95,
    title: str | None = None,
    ax=None,
    figsize: tuple[int, int] = (10, 6),
):
    """Weighted treated vs control mean outcome by event time.

    Treated and weighted control means are drawn with CI bands from the
    weighted standard error; the unweighted control mean is drawn dashed to
    show what the corrective weights change.

    Parameters
    ----------
    stack : pd.DataFrame
        Weighted stack (output of ``WeightComputer.compute``).
    outcome : str
        Outcome column.
    config : StackConfig, optional
        Column name mapping.
    ci : float
        Confidence level (0.80, 0.90, 0.95 or 0.99).
    title : str, optional
        Plot title.
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, creates new figure.
    figsize : tuple
        Figure size when a new figure is created.

    Returns
    -------
    matplotlib.figure.Figure
    """
    import matplotlib.pyplot as plt

    c = config or StackConfig()
    z = get_z(ci)
    stats = StackDiagnostics(c).weighted_means(stack, outcome)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    for treated_val, label in ((1, "Treated"), (0, "Control (weighted)")):
        data = stats[stats[c.treated_col] == treated_val]
        if data.empty:
            continue
        color = COLORS["treated"] if treated_val == 1 else COLORS["control"]
        sem = data["weighted_sem"].fillna(0)
        ax.plot(data[c.event_time_col], data["weighted_mean"], "o-", linewidth=2, color=color, label=label)
        ax.fill_between(
            data[c.event_time_col],
            data["weighted_mean"] - z * sem,
            data["weighted_mean"] + z * sem,
            alpha=0.2, color=color,
        )

    control = stats[stats[c.treated_col] == 0]
    if not control.empty:
        ax.plot(
            control[c.event_time_col], control["mean"], "--",
            linewidth=1.5, color=COLORS["control_raw"], label="Control (unweighted)",
        )

    ax.axvline(-0.5, linestyle="--", color=COLORS["highlight"], linewidth=1.5, alpha=0.7)
    ax.set_xticks(sorted(stats[c.event_time_col].unique()))
    style_axis_labels(ax, "Event time", f"Mean {outcome}")
    style_title(ax, title or "Stacked Event Study")
    ax.legend()

    plt.tight_layout()
    return fig


def plot_weight_heatmap(
    stack: pd.DataFrame,
    config: StackConfig | None = None,
    title: str | None = None,
    figsize: tuple[int, int] = (10, 6),
):
    """Heatmap of control weights by sub-experiment x event time.

    Parameters
    ----------
    stack : pd.DataFrame
        Stacked panel (weights are recomputed from its composition).
    config : StackConfig, optional
        Column name mapping.
    title : str, optional
        Plot title.
    figsize : tuple
        Figure size.

    Returns
    -------
    matplotlib.figure.Figure
    """
    import matplotlib.pyplot as plt
    import seaborn as sns

    c = config or StackConfig()
    shares = WeightComputer(c).shares(stack)
    grid = shares.pivot(index=c.sub_exp_col, columns=c.event_time_col, values="control_weight")

    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(
        grid, cmap="RdYlBu_r", center=1.0, annot=True, fmt=".2f",
        ax=ax, cbar_kws={"label": "Control weight"},
    )
    style_axis_labels(ax, "Event time", "Sub-experiment")
    style_title(ax, title or "Control Weights by Sub-experiment")

    plt.tight_layout()
    return fig
