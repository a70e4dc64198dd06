"""Capacity check — cells must share a single row."""

from layout_grammar.audit.base import BaseAuditCheck
from layout_grammar.audit.models import AuditCode, AuditFinding, Severity
from layout_grammar.normalization import CELL_WIDTH_KEYS, normalize_cell_width, pick


class CapacityCheck(BaseAuditCheck):
    """Sum of cell widths may not exceed the units of one row."""

    @property
    def name(self) -> str:
        return "CapacityCheck"

    def check(self, block, block_width_px) -> list[AuditFinding]:
        cells = self._get_cells(block)
        total_units = sum(normalize_cell_width(pick(c, *CELL_WIDTH_KEYS)) for c in cells)
        capacity = self.settings.GRID_UNITS_PER_ROW

        if total_units <= capacity:
            return []

        return [self._finding(
            code=AuditCode.BLOCK_CAPACITY_EXCEEDED,
            severity=Severity.MEDIUM,
            message=f"Cell widths add up to {total_units} units, a row holds {capacity}",
            field="cells",
            suggestion="Move cells into a new block or make them narrower",
            evidence=total_units,
        )]
