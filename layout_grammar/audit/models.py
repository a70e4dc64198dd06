"""Audit models — finding codes, severities and the report an editor shows.

Audits are advisory: they describe what the normalization boundary is about
to change. Publish gating stays with the editor validation API.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Audit finding severity levels."""

    CRITICAL = "critical"  # Block cannot be laid out as authored
    HIGH = "high"          # Authored value will be replaced
    MEDIUM = "medium"      # Layout will differ from what the author expects
    LOW = "low"            # Informational


class AuditCode(str, Enum):
    """Deterministic codes for every audit rule.

    Naming convention: SUBJECT_SPECIFIC_ISSUE
    """

    # Block geometry
    BLOCK_WIDTH_INVALID = "BLOCK_WIDTH_INVALID"
    BLOCK_WIDTH_ZERO = "BLOCK_WIDTH_ZERO"
    BLOCK_WIDTH_LARGE = "BLOCK_WIDTH_LARGE"
    MAX_HEIGHT_INVALID = "MAX_HEIGHT_INVALID"
    MAX_HEIGHT_BELOW_MINIMUM = "MAX_HEIGHT_BELOW_MINIMUM"
    BLOCK_EMPTY = "BLOCK_EMPTY"
    BLOCK_ASPECT_RATIO_UNSUPPORTED = "BLOCK_ASPECT_RATIO_UNSUPPORTED"
    HARD_ASPECT_IGNORED_BY_MEDIA = "HARD_ASPECT_IGNORED_BY_MEDIA"

    # Cell domains
    CELL_BODY_TYPE_UNKNOWN = "CELL_BODY_TYPE_UNKNOWN"
    CELL_WIDTH_OUT_OF_RANGE = "CELL_WIDTH_OUT_OF_RANGE"
    CELL_ASPECT_RATIO_UNSUPPORTED = "CELL_ASPECT_RATIO_UNSUPPORTED"
    CELL_IMAGE_MODE_UNKNOWN = "CELL_IMAGE_MODE_UNKNOWN"
    CELL_METADATA_INVALID = "CELL_METADATA_INVALID"

    # Capacity
    BLOCK_CAPACITY_EXCEEDED = "BLOCK_CAPACITY_EXCEEDED"
    AUDIT_CHECK_CRASHED = "AUDIT_CHECK_CRASHED"


class AuditFinding(BaseModel):
    """A single audit finding."""

    code: AuditCode
    severity: Severity
    message: str
    cell_id: Optional[str] = Field(default=None, alias="cellId")  # Which cell is affected
    field: Optional[str] = None       # Which input field triggered this
    suggestion: Optional[str] = None  # How to fix it
    evidence: Optional[str] = None    # The value that triggered the finding

    model_config = {"frozen": True, "populate_by_name": True}


class AuditReport(BaseModel):
    """Complete audit of one block — the output of the audit engine."""

    block_id: str = Field(default="", alias="blockId")
    clean: bool = Field(description="True if no critical or high findings")
    summary: dict[str, int] = Field(
        description="Count of findings by severity",
        default_factory=lambda: {s.value: 0 for s in Severity},
    )
    findings: list[AuditFinding] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, findings: list[AuditFinding], block_id: str = "") -> "AuditReport":
        """Build a report from a list of findings."""
        summary = {s.value: 0 for s in Severity}
        for finding in findings:
            summary[finding.severity.value] += 1

        order = list(Severity)
        return cls(
            block_id=block_id,
            clean=summary["critical"] == 0 and summary["high"] == 0,
            summary=summary,
            findings=sorted(findings, key=lambda f: order.index(f.severity)),
        )
