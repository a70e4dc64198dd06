"""Table rule — visible row limit."""

from layout_grammar.fit.base import BaseFitRule
from layout_grammar.geometry import metadata_count
from layout_grammar.models import BodyType, RequiredAction
from layout_grammar.reference_data import ROW_COUNT_KEY


class TableFitRule(BaseFitRule):
    """Tables never scroll: more rows than the limit must be aggregated."""

    body_type = BodyType.TABLE

    def check(self, cell, available_width, available_height):
        row_count = metadata_count(cell, ROW_COUNT_KEY)
        max_rows = self.settings.TABLE_MAX_VISIBLE_ROWS

        if row_count <= max_rows:
            return self._fits()

        return self._fails(
            [f"Table has {row_count} rows, exceeds maximum of {max_rows} visible rows"],
            [RequiredAction.AGGREGATE],
        )
