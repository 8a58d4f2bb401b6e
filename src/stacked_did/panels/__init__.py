"""Sub-experiment and stacked panel builders."""

from .design import add_event_dummies, event_study_formula, event_terms
from .stacked import StackAssembler
from .sub_experiment import SubExperimentBuilder

__all__ = [
    "SubExperimentBuilder",
    "StackAssembler",
    "add_event_dummies",
    "event_study_formula",
    "event_terms",
]
