"""Audit Engine — runs all audit checks against one block and builds the report.

Usage:
    report = audit_engine.audit(block, block_width_px=1200)
    for finding in report.findings:
        # Show finding.message next to finding.field in the editor
"""

import time
from typing import Any, Optional

import structlog

from layout_grammar.audit.base import BaseAuditCheck
from layout_grammar.audit.block_checks import BlockGeometryCheck
from layout_grammar.audit.capacity_check import CapacityCheck
from layout_grammar.audit.cell_checks import CellDomainCheck
from layout_grammar.audit.models import AuditCode, AuditFinding, AuditReport, Severity
from layout_grammar.config import LayoutSettings, get_settings
from layout_grammar.normalization import BLOCK_ID_KEYS, as_mapping, normalize_identifier, pick

logger = structlog.get_logger()


class AuditEngine:
    """Orchestrates all audit checks and produces a unified report.

    Design principles:
        - Deterministic: same block → same report
        - Isolated: a crashing check is reported, the others still run
        - Extensible: add checks without modifying the engine
    """

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        checks: Optional[list[BaseAuditCheck]] = None,
    ):
        self.settings = settings or get_settings()
        self.checks = checks if checks is not None else self._default_checks(self.settings)

    @staticmethod
    def _default_checks(settings: LayoutSettings) -> list[BaseAuditCheck]:
        """Create the default check chain in execution order."""
        return [
            BlockGeometryCheck(settings),
            CellDomainCheck(settings),
            CapacityCheck(settings),
        ]

    def audit(self, block: Any, block_width_px: Any) -> AuditReport:
        """Run all checks against the block as authored.

        Args:
            block: Block definition from the editor or a persisted template
            block_width_px: Width the block will be rendered at

        Returns:
            AuditReport with every finding, most severe first
        """
        start_time = time.perf_counter()
        raw = as_mapping(block)
        block_id = normalize_identifier(pick(raw, *BLOCK_ID_KEYS))

        findings: list[AuditFinding] = []
        check_timings: dict[str, float] = {}

        for check in self.checks:
            c_start = time.perf_counter()
            try:
                findings.extend(check.check(raw, block_width_px))
            except Exception as e:
                logger.error(
                    "audit_check_failed",
                    check=check.name,
                    block_id=block_id,
                    error=str(e),
                )
                findings.append(AuditFinding(
                    code=AuditCode.AUDIT_CHECK_CRASHED,
                    severity=Severity.MEDIUM,
                    message=f"Audit check '{check.name}' crashed: {e}",
                ))
            finally:
                check_timings[check.name] = round((time.perf_counter() - c_start) * 1000, 3)

        report = AuditReport.build(findings, block_id=block_id)

        logger.debug(
            "audit_complete",
            block_id=block_id,
            clean=report.clean,
            summary=report.summary,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
            check_timings=check_timings,
        )

        return report

    def add_check(self, check: BaseAuditCheck) -> None:
        """Add a custom check to the chain."""
        self.checks.append(check)

    def remove_check(self, check_name: str) -> None:
        """Remove a check by name."""
        self.checks = [c for c in self.checks if c.name != check_name]


# Module-level singleton
audit_engine = AuditEngine()
