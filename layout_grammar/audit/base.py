"""Base audit check — abstract class implementing the Strategy Pattern.

Each check is a standalone, independently testable unit. New checks are
added without modifying the engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from layout_grammar.audit.models import AuditCode, AuditFinding, Severity
from layout_grammar.config import LayoutSettings
from layout_grammar.normalization import BLOCK_ASPECT_RATIO_KEYS, CHART_ID_KEYS, as_list, as_mapping, pick


class BaseAuditCheck(ABC):
    """Abstract base for block audit checks.

    Contract:
        - check() is deterministic and reads the raw block as authored
        - check() returns a list of AuditFinding (empty = nothing to report)
        - raw values are never trusted; read them through the helpers
    """

    def __init__(self, settings: LayoutSettings):
        self.settings = settings

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @abstractmethod
    def check(self, block: Mapping, block_width_px: Any) -> list[AuditFinding]:
        ...

    # ── Helper Methods ──

    def _finding(
        self,
        code: AuditCode,
        severity: Severity,
        message: str,
        cell_id: Optional[str] = None,
        field: Optional[str] = None,
        suggestion: Optional[str] = None,
        evidence: Any = None,
    ) -> AuditFinding:
        """Convenience method to create an AuditFinding."""
        return AuditFinding(
            code=code,
            severity=severity,
            message=message,
            cell_id=cell_id,
            field=field,
            suggestion=suggestion,
            evidence=None if evidence is None else repr(evidence),
        )

    def _get_cells(self, block: Mapping) -> list[Mapping]:
        """Safely extract cells as mappings."""
        return [as_mapping(cell) for cell in as_list(block.get("cells"))]

    def _get_constraint(self, block: Mapping) -> Optional[Mapping]:
        raw = pick(block, *BLOCK_ASPECT_RATIO_KEYS)
        if raw is None:
            return None
        if isinstance(raw, str):
            return {"ratio": raw}
        return as_mapping(raw)

    def _cell_id(self, cell: Mapping, index: int) -> str:
        chart_id = pick(cell, *CHART_ID_KEYS)
        return str(chart_id) if chart_id is not None else f"cell-{index}"
