"""Sub-experiment builder: one clean treated/control panel per adoption time.

For a focal adoption time g, the sub-experiment keeps the cohort adopting at g
as the treated group and, as controls, every unit that is either never treated
or adopts strictly after g + kappa_post. Units adopting inside (g, g + kappa_post]
would turn treated before the window closes and are dropped. Rows are then
trimmed to the event window [g - kappa_pre, g + kappa_post].

Reference:
    Cengiz, D., Dube, A., Lindner, A., & Zipperer, B. (2019). The effect of
    minimum wages on low-wage jobs. Quarterly Journal of Economics.
"""

from __future__ import annotations

import logging
import numbers

import numpy as np
import pandas as pd

from .._types import StackConfig
from .._validation import check_window, require_columns
from ..exceptions import EmptyResultError, InvalidWindowError, SchemaError

logger = logging.getLogger(__name__)


class SubExperimentBuilder:
    """Build the sub-experiment for a single focal adoption time.

    The panel is validated and copied once at construction, so the same
    builder can be asked for many focal times.

    Parameters
    ----------
    df : pd.DataFrame
        Long panel with at least ``unit_col``, ``time_col`` and ``adoption_col``.
        Never-adopted units carry a missing adoption time (or ``never_value``).
    config : StackConfig, optional
        Column name mapping. Uses defaults if not provided.
    kappa_pre : int
        Number of pre-adoption periods in the event window (default: 3).
    kappa_post : int
        Number of post-adoption periods in the event window (default: 3).

    Example
    -------
    >>> config = StackConfig(unit_col="state", time_col="year", adoption_col="adopt_year")
    >>> builder = SubExperimentBuilder(df, config=config, kappa_pre=3, kappa_post=2)
    >>> df_2014 = builder.build(2014)
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: StackConfig | None = None,
        kappa_pre: int = 3,
        kappa_post: int = 3,
    ):
        self.config = config or StackConfig()
        self.kappa_pre, self.kappa_post = check_window(kappa_pre, kappa_post)
        self._df = df.copy()
        self._validate_input()

        # Observed calendar range of the whole panel, fixed before any filtering
        c = self.config
        self.time_min = int(self._df[c.time_col].min())
        self.time_max = int(self._df[c.time_col].max())

    def _validate_input(self) -> None:
        """Check required columns, coerce types and enforce panel invariants."""
        c = self.config
        stage = type(self).__name__
        required = [c.unit_col, c.time_col, c.adoption_col]
        if c.outcome_col is not None:
            required.append(c.outcome_col)
        require_columns(self._df, required, stage=stage)

        if self._df.empty:
            raise SchemaError(f"{stage}: panel is empty", stage=stage)

        df = self._df
        df[c.unit_col] = df[c.unit_col].astype(str)

        time = pd.to_numeric(df[c.time_col], errors="coerce")
        bad_time = time.isna() | (time % 1 != 0)
        if bad_time.any():
            raise SchemaError(
                f"{stage}: {c.time_col} must hold integer periods; "
                f"{int(bad_time.sum())} missing or non-integer values",
                stage=stage,
            )
        df[c.time_col] = time.astype(np.int64)

        adoption = pd.to_numeric(df[c.adoption_col], errors="coerce").astype(float)
        never = adoption.isna() | np.isinf(adoption)
        if c.never_value is not None:
            never |= adoption == c.never_value
        adoption = adoption.mask(never)
        fractional = adoption.notna() & (adoption % 1 != 0)
        if fractional.any():
            raise SchemaError(
                f"{stage}: {c.adoption_col} must hold integer periods; "
                f"found {sorted(adoption[fractional].unique().tolist())}",
                stage=stage,
            )
        df[c.adoption_col] = adoption.astype("Int64")

        dup = df.duplicated([c.unit_col, c.time_col])
        if dup.any():
            raise SchemaError(
                f"{stage}: {int(dup.sum())} duplicate ({c.unit_col}, {c.time_col}) rows",
                stage=stage,
            )

        n_adopt = df.groupby(c.unit_col)[c.adoption_col].nunique(dropna=False)
        varying = n_adopt[n_adopt > 1].index.tolist()
        if varying:
            raise SchemaError(
                f"{stage}: {c.adoption_col} varies within units: {varying[:10]}",
                stage=stage,
            )

        n_units = df[c.unit_col].nunique()
        n_never = df.loc[df[c.adoption_col].isna(), c.unit_col].nunique()
        logger.info(
            "%s initialized: %s observations, %s units (%s never adopted)",
            stage,
            f"{len(df):,}",
            f"{n_units:,}",
            f"{n_never:,}",
        )

    @property
    def events(self) -> list[int]:
        """Distinct non-missing adoption times, sorted."""
        adoption = self._df[self.config.adoption_col].dropna()
        return sorted(int(t) for t in adoption.unique())

    def is_feasible(self, focal_time: int) -> bool:
        """Whether the full window around ``focal_time`` lies inside the panel."""
        return (
            focal_time - self.kappa_pre >= self.time_min
            and focal_time + self.kappa_post <= self.time_max
        )

    def build(self, focal_time: int) -> pd.DataFrame:
        """Build the sub-experiment for one focal adoption time.

        Parameters
        ----------
        focal_time : int
            Adoption time of the treated cohort.

        Returns
        -------
        pd.DataFrame
            Panel rows of the treated cohort and its clean controls inside
            the event window, sorted by unit and time, with added columns:

            - ``treat``: 1 if the unit adopts at ``focal_time``
            - ``post``: 1 if ``time >= focal_time``
            - ``event_time``: ``time - focal_time``
            - ``feasible``: 1 if the window fits the observed time range
            - ``sub_exp``: ``focal_time``
            - ``control_type``: 'treated', 'never_treated' or 'not_yet_treated'

        Raises
        ------
        InvalidWindowError
            If ``focal_time`` is not an integer period.
        EmptyResultError
            If no unit adopts at ``focal_time`` or the treated cohort has no
            rows inside the window.
        """
        if isinstance(focal_time, bool) or not isinstance(focal_time, numbers.Integral):
            raise InvalidWindowError(f"focal_time must be an integer period, got {focal_time!r}")
        g = int(focal_time)

        c = self.config
        df = self._df
        adoption = df[c.adoption_col]

        is_treated = adoption.eq(g).fillna(False).astype(bool)
        is_clean = adoption.gt(g + self.kappa_post).fillna(False).astype(bool)
        is_never = adoption.isna()
        in_window = df[c.time_col].between(g - self.kappa_pre, g + self.kappa_post)

        sub = df.loc[(is_treated | is_clean | is_never) & in_window].copy()
        treated = is_treated.loc[sub.index]
        if not treated.any():
            raise EmptyResultError(
                f"Sub-experiment {g}: no treated observations in window "
                f"[{g - self.kappa_pre}, {g + self.kappa_post}]"
            )

        sub[c.treated_col] = treated.astype(int)
        sub[c.post_col] = (sub[c.time_col] >= g).astype(int)
        sub[c.event_time_col] = (sub[c.time_col] - g).astype(int)
        sub[c.feasible_col] = int(self.is_feasible(g))
        sub[c.sub_exp_col] = g
        sub["control_type"] = np.select(
            [treated.to_numpy(), sub[c.adoption_col].isna().to_numpy()],
            ["treated", "never_treated"],
            default="not_yet_treated",
        )

        sub = sub.sort_values([c.unit_col, c.time_col], kind="stable").reset_index(drop=True)

        logger.info(
            "Sub-experiment %s: %s treated units, %s control units, %s rows%s",
            g,
            f"{sub.loc[sub[c.treated_col] == 1, c.unit_col].nunique():,}",
            f"{sub.loc[sub[c.treated_col] == 0, c.unit_col].nunique():,}",
            f"{len(sub):,}",
            "" if sub[c.feasible_col].iat[0] == 1 else " (infeasible window)",
        )
        return sub
