"""Tests for IO export functions."""

import pandas as pd
import pytest

from stacked_did import stack_panel
from stacked_did.io import to_csv, to_parquet, to_stata


@pytest.fixture
def weighted(simple_panel, config):
    return stack_panel(simple_panel, config=config, kappa_pre=2, kappa_post=2)


class TestExport:
    def test_to_csv(self, weighted, tmp_path):
        path = tmp_path / "stack.csv"
        to_csv(weighted, path)
        result = pd.read_csv(path)
        assert len(result) == len(weighted)
        assert "stack_weight" in result.columns

    def test_to_csv_never_adopted_empty(self, weighted, tmp_path):
        path = tmp_path / "stack.csv"
        to_csv(weighted, path)
        result = pd.read_csv(path)
        never = result[result["control_type"] == "never_treated"]
        assert never["adopt_year"].isna().all()

    def test_to_stata(self, weighted, tmp_path):
        path = tmp_path / "stack.dta"
        to_stata(weighted, path)
        result = pd.read_stata(path)
        assert len(result) == len(weighted)
        assert result["adopt_year"].isna().sum() == weighted["adopt_year"].isna().sum()

    def test_to_stata_truncates_long_names(self, weighted, tmp_path):
        long_name = "a_very_long_column_name_for_stata_export"
        path = tmp_path / "stack.dta"
        to_stata(weighted.assign(**{long_name: 1}), path)
        result = pd.read_stata(path)
        assert long_name[:32] in result.columns

    def test_to_parquet(self, weighted, tmp_path):
        pytest.importorskip("pyarrow", reason="pyarrow not installed")
        path = tmp_path / "stack.parquet"
        to_parquet(weighted, path)
        result = pd.read_parquet(path)
        assert len(result) == len(weighted)
        assert "stack_weight" in result.columns
