"""Tests for event-study design helpers."""

import pytest

from stacked_did import StackAssembler
from stacked_did.exceptions import SchemaError
from stacked_did.panels import add_event_dummies, event_study_formula, event_terms


@pytest.fixture
def stack(expansion_panel, config):
    return StackAssembler(expansion_panel, config=config, kappa_pre=3, kappa_post=2).build()


class TestEventDummies:
    def test_reference_omitted(self, stack, config):
        df = add_event_dummies(stack, config)

        assert "treat_x_et_m1" not in df.columns
        for col in ["treat_x_et_m3", "treat_x_et_m2", "treat_x_et_0", "treat_x_et_p1", "treat_x_et_p2"]:
            assert col in df.columns, f"Missing column: {col}"

    def test_dummy_values(self, stack, config):
        df = add_event_dummies(stack, config)

        expected = ((df["treat"] == 1) & (df["event_time"] == 0)).astype(int)
        assert (df["treat_x_et_0"] == expected).all()
        assert df.loc[df["treat"] == 0, "treat_x_et_p2"].sum() == 0

    def test_custom_reference_and_prefix(self, stack, config):
        df = add_event_dummies(stack, config, reference=-3, prefix="d")
        assert "d_m3" not in df.columns
        assert "d_m1" in df.columns

    def test_input_not_mutated(self, stack, config):
        cols = list(stack.columns)
        add_event_dummies(stack, config)
        assert list(stack.columns) == cols

    def test_missing_columns_raise(self, stack, config):
        with pytest.raises(SchemaError):
            add_event_dummies(stack.drop(columns=["treat"]), config)


class TestFormula:
    def test_terms_sorted(self, stack, config):
        assert event_terms(stack, config) == [
            "treat_x_et_m3",
            "treat_x_et_m2",
            "treat_x_et_0",
            "treat_x_et_p1",
            "treat_x_et_p2",
        ]

    def test_formula(self, stack, config):
        formula = event_study_formula(stack, "outcome", config)
        assert formula == (
            "outcome ~ treat_x_et_m3 + treat_x_et_m2 + treat_x_et_0 "
            "+ treat_x_et_p1 + treat_x_et_p2 | treat + event_time"
        )
