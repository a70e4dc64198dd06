"""Fit Validator — judges whether one cell's content fits a width × height budget.

Usage:
    validation = fit_validator.validate(cell, available_width=600, available_height=300)
    if not validation.fits:
        # validation.required_actions says what the editor must change
"""

from typing import Optional

from layout_grammar.config import LayoutSettings, get_settings
from layout_grammar.fit.bar_rule import BarFitRule
from layout_grammar.fit.base import BaseFitRule
from layout_grammar.fit.compact_rules import ImageFitRule, KpiFitRule, TextFitRule
from layout_grammar.fit.pie_rule import PieFitRule
from layout_grammar.fit.table_rule import TableFitRule
from layout_grammar.models import BodyType, CellConfiguration, ElementFitValidation


class FitValidator:
    """Dispatches each cell to the rule for its body type.

    Every BodyType must have exactly one rule; a gap is a programming error
    and is reported when the validator is built, not when a cell arrives.
    """

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        rules: Optional[list[BaseFitRule]] = None,
    ):
        self.settings = settings or get_settings()
        rules = rules or self._default_rules(self.settings)
        self.rules: dict[BodyType, BaseFitRule] = {rule.body_type: rule for rule in rules}

        missing = [bt.value for bt in BodyType if bt not in self.rules]
        if missing:
            raise ValueError(f"No fit rule for body type(s): {', '.join(missing)}")

    @staticmethod
    def _default_rules(settings: LayoutSettings) -> list[BaseFitRule]:
        return [
            TextFitRule(settings),
            KpiFitRule(settings),
            ImageFitRule(settings),
            TableFitRule(settings),
            PieFitRule(settings),
            BarFitRule(settings),
        ]

    def validate(
        self, cell: CellConfiguration, available_width: float, available_height: float
    ) -> ElementFitValidation:
        return self.rules[cell.body_type].check(cell, available_width, available_height)


# Module-level singleton
fit_validator = FitValidator()
