"""Block audit — advisory findings about authored block definitions.

Usage:
    from layout_grammar.audit import audit_engine

    report = audit_engine.audit(block, block_width_px=1200)
    if not report.clean:
        # Show report.findings in the editor
"""

from layout_grammar.audit.base import BaseAuditCheck
from layout_grammar.audit.engine import AuditEngine, audit_engine
from layout_grammar.audit.models import AuditCode, AuditFinding, AuditReport, Severity

__all__ = [
    "AuditEngine",
    "audit_engine",
    "AuditReport",
    "AuditFinding",
    "AuditCode",
    "Severity",
    "BaseAuditCheck",
]
