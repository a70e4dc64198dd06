"""Base fit rule — abstract class implementing the Strategy Pattern.

Each body type has one rule. New body types get a new rule without
touching the FitValidator dispatch.
"""

from abc import ABC, abstractmethod
from typing import Optional

from layout_grammar.config import LayoutSettings
from layout_grammar.models import BodyType, CellConfiguration, ElementFitValidation, RequiredAction

# Shared result for every cell that fits; models are frozen
FITS = ElementFitValidation(fits=True)


class BaseFitRule(ABC):
    """Abstract base for per-body-type fit rules.

    Contract:
        - check() is a pure function of (cell, width, height)
        - violations is non-empty exactly when fits is False
        - never emits splitBlock; splitting is a block-level decision
    """

    def __init__(self, settings: LayoutSettings):
        self.settings = settings

    @property
    @abstractmethod
    def body_type(self) -> BodyType:
        """Body type this rule judges."""
        ...

    @abstractmethod
    def check(
        self, cell: CellConfiguration, available_width: float, available_height: float
    ) -> ElementFitValidation:
        ...

    # ── Helper Methods ──

    def _fits(self) -> ElementFitValidation:
        return FITS

    def _fails(
        self,
        violations: list[str],
        actions: list[RequiredAction],
        required_height: Optional[float] = None,
    ) -> ElementFitValidation:
        return ElementFitValidation(
            fits=False,
            violations=violations,
            required_actions=actions,
            required_height=required_height,
        )
