"""Tests for visualization style utilities."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from stacked_did.visualization._style import COLORS, apply_style, get_z


class TestGetZ:
    def test_known_values(self):
        assert get_z(0.95) == 1.960
        assert get_z(0.90) == 1.645
        assert get_z(0.99) == 2.576

    def test_invalid_ci(self):
        with pytest.raises(ValueError, match="Unsupported CI"):
            get_z(0.50)


class TestApplyStyle:
    def teardown_method(self):
        matplotlib.rcdefaults()

    def test_runs_without_error(self):
        apply_style()
        assert plt.rcParams["axes.grid"] is False
        assert plt.rcParams["axes.titleweight"] == "bold"

    def test_slides_background(self):
        apply_style(slides=True)
        assert matplotlib.colors.to_hex(plt.rcParams["axes.facecolor"]).lower() == "#ececec"

    def test_left_title(self):
        apply_style(title_pos="left", base_size=10)
        assert plt.rcParams["axes.titlelocation"] == "left"
        assert plt.rcParams["font.size"] == 10

    def test_invalid_position(self):
        with pytest.raises(ValueError, match="title_pos"):
            apply_style(title_pos="right")


class TestColors:
    def test_has_required_keys(self):
        for key in ["treated", "control", "pre", "post", "highlight"]:
            assert key in COLORS
