"""Pie rule — minimum legible radius once title and legend take their share."""

from layout_grammar.fit.base import BaseFitRule
from layout_grammar.geometry import metadata_count, pie_required_height, pie_share
from layout_grammar.models import BodyType, RequiredAction
from layout_grammar.reference_data import LEGEND_ITEM_COUNT_KEY


class PieFitRule(BaseFitRule):
    """The pie keeps a fixed share of the cell height; its radius must stay legible.

    The diameter also has to fit across the cell, so a sliver of a cell fails
    even when it is tall enough.
    """

    body_type = BodyType.PIE

    def check(self, cell, available_width, available_height):
        legend_items = metadata_count(cell, LEGEND_ITEM_COUNT_KEY)
        violations = []
        actions = set()
        required_height = None

        # ── 1. Height share ──
        needed = pie_required_height(legend_items, self.settings)
        if available_height < needed:
            required_height = needed
            radius = available_height * pie_share(legend_items, self.settings) / 2
            violations.append(
                f"Pie radius {radius:.1f}px is below the legible minimum of "
                f"{self.settings.PIE_MIN_RADIUS_PX}px; needs {needed:.0f}px height "
                f"for {legend_items} legend items"
            )
            actions.add(RequiredAction.INCREASE_HEIGHT)

        # ── 2. Diameter across the cell ──
        min_width = 2 * self.settings.PIE_MIN_RADIUS_PX
        if available_width < min_width:
            violations.append(
                f"Pie needs {min_width}px width for its minimum diameter, has {available_width:.0f}px"
            )
            actions.add(RequiredAction.REFLOW)

        if not violations:
            return self._fits()

        return self._fails(
            violations,
            [a for a in RequiredAction if a in actions],
            required_height=required_height,
        )
