"""Tests for stacked event-study visualization."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest
from matplotlib.figure import Figure

from stacked_did import StackConfig, stack_panel
from stacked_did.visualization import plot_stacked_event_study, plot_weight_heatmap


@pytest.fixture
def weighted(expansion_panel, config):
    return stack_panel(expansion_panel, config=config, kappa_pre=3, kappa_post=2)


class TestPlotStackedEventStudy:
    def teardown_method(self):
        plt.close("all")

    def test_returns_figure(self, weighted, config):
        fig = plot_stacked_event_study(weighted, outcome="outcome", config=config)
        assert isinstance(fig, Figure)
        assert len(fig.axes[0].lines) >= 3

    def test_existing_axes(self, weighted, config):
        fig, ax = plt.subplots()
        out = plot_stacked_event_study(weighted, outcome="outcome", config=config, ax=ax, ci=0.90)
        assert out is fig

    def test_custom_cols(self, weighted, config):
        df = weighted.rename(columns={"treat": "tr", "event_time": "et"})
        custom = StackConfig(
            unit_col="unit_id", time_col="year", adoption_col="adopt_year",
            treated_col="tr", event_time_col="et",
        )
        fig = plot_stacked_event_study(df, outcome="outcome", config=custom)
        assert isinstance(fig, Figure)


class TestPlotWeightHeatmap:
    def teardown_method(self):
        plt.close("all")

    def test_returns_figure(self, weighted, config):
        fig = plot_weight_heatmap(weighted, config=config)
        assert isinstance(fig, Figure)
        assert len(fig.axes) >= 2
