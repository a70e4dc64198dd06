"""Bar rule — one legible row per bar, label column plus track in width."""

from layout_grammar.fit.base import BaseFitRule
from layout_grammar.geometry import bar_required_height, metadata_count
from layout_grammar.models import BodyType, RequiredAction
from layout_grammar.reference_data import BAR_COUNT_KEY


class BarFitRule(BaseFitRule):
    """Horizontal bars: each bar needs a full label row, so height grows with count."""

    body_type = BodyType.BAR

    def check(self, cell, available_width, available_height):
        bar_count = metadata_count(cell, BAR_COUNT_KEY, self.settings.BAR_DEFAULT_COUNT)
        if bar_count == 0:
            return self._fits()

        violations = []
        actions = set()
        required_height = None

        # ── 1. Row height ──
        needed = bar_required_height(bar_count)
        if available_height < needed:
            required_height = needed
            violations.append(
                f"Bar chart requires minimum height of {needed:.0f}px for {bar_count} bars, "
                f"has {available_height:.0f}px"
            )
            actions.add(RequiredAction.INCREASE_HEIGHT)
            if needed > self.settings.MAX_HEIGHT_PX:
                # No block gets that tall; bars must move to a wider layout
                actions.add(RequiredAction.REFLOW)

        # ── 2. Label column + track width ──
        min_width = self.settings.BAR_MIN_CELL_WIDTH_PX
        if available_width < min_width:
            violations.append(
                f"Bar chart needs {min_width}px width for labels and tracks, has {available_width:.0f}px"
            )
            actions.add(RequiredAction.REFLOW)

        if not violations:
            return self._fits()

        return self._fails(
            violations,
            [a for a in RequiredAction if a in actions],
            required_height=required_height,
        )
