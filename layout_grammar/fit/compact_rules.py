"""Rules for body types that always fit their cell."""

from layout_grammar.fit.base import BaseFitRule
from layout_grammar.models import BodyType


class TextFitRule(BaseFitRule):
    """Text scales its type to the box it is given."""

    body_type = BodyType.TEXT

    def check(self, cell, available_width, available_height):
        return self._fits()


class KpiFitRule(BaseFitRule):
    body_type = BodyType.KPI

    def check(self, cell, available_width, available_height):
        return self._fits()


class ImageFitRule(BaseFitRule):
    """Intrinsic images set the block height themselves; cover images crop."""

    body_type = BodyType.IMAGE

    def check(self, cell, available_width, available_height):
        return self._fits()
