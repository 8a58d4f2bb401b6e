"""Shared fixtures for stacked-did tests."""

import numpy as np
import pandas as pd
import pytest

from stacked_did import StackConfig


@pytest.fixture
def config() -> StackConfig:
    return StackConfig(
        unit_col="unit_id",
        time_col="year",
        adoption_col="adopt_year",
        outcome_col="outcome",
    )


@pytest.fixture
def simple_panel() -> pd.DataFrame:
    """Panel with 7 units, 10 years (2005-2014).

    - Units 1-2: adopt 2010
    - Unit 3: adopts 2012
    - Unit 4: adopts 2014 (last panel year)
    - Units 5-7: never adopt (missing adoption year)
    """
    rng = np.random.default_rng(42)
    adoption = {"1": 2010, "2": 2010, "3": 2012, "4": 2014}
    rows = []
    for unit_id in range(1, 8):
        uid = str(unit_id)
        adopt = adoption.get(uid, np.nan)
        for year in range(2005, 2015):
            effect = 1.0 if not np.isnan(adopt) and year >= adopt else 0.0
            rows.append({
                "unit_id": uid,
                "year": year,
                "adopt_year": adopt,
                "outcome": rng.normal(10, 2) + effect,
            })
    return pd.DataFrame(rows)


@pytest.fixture
def expansion_panel() -> pd.DataFrame:
    """51 units x 14 years (2008-2021) with staggered adoption.

    28 units adopt 2014, 3 adopt 2015, 2 adopt 2016, 2 adopt 2019,
    and 16 never adopt.
    """
    rng = np.random.default_rng(7)
    cohorts = [2014] * 28 + [2015] * 3 + [2016] * 2 + [2019] * 2 + [None] * 16
    rows = []
    for i, adopt in enumerate(cohorts, start=1):
        for year in range(2008, 2022):
            treated_now = adopt is not None and year >= adopt
            rows.append({
                "unit_id": f"{i:02d}",
                "year": year,
                "adopt_year": adopt,
                "outcome": rng.normal(15, 3) - (2.0 if treated_now else 0.0),
            })
    return pd.DataFrame(rows)


@pytest.fixture
def never_treated_only() -> pd.DataFrame:
    """Panel where no unit ever adopts."""
    rows = []
    for uid in range(1, 6):
        for year in range(2005, 2010):
            rows.append({
                "unit_id": str(uid),
                "year": year,
                "adopt_year": np.nan,
                "outcome": 1.0,
            })
    return pd.DataFrame(rows)


@pytest.fixture
def share_stack() -> pd.DataFrame:
    """Hand-built stack at event_time 0.

    Sub-experiment A (1): 2 treated, 1 control.
    Sub-experiment B (2): 2 treated, 3 control.
    Stack totals: 4 treated, 4 control.
    """
    return pd.DataFrame({
        "unit_id": ["a1", "a2", "a3", "b1", "b2", "b3", "b4", "b5"],
        "sub_exp": [1, 1, 1, 2, 2, 2, 2, 2],
        "event_time": [0] * 8,
        "treat": [1, 1, 0, 1, 1, 0, 0, 0],
    })
