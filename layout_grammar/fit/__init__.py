"""Per-cell fit validation — one rule per body type."""

from layout_grammar.fit.base import BaseFitRule
from layout_grammar.fit.validator import FitValidator, fit_validator

__all__ = ["BaseFitRule", "FitValidator", "fit_validator"]
