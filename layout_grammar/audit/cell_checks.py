"""Cell domain check — values the normalization boundary will replace."""

from collections.abc import Mapping

from layout_grammar.audit.base import BaseAuditCheck
from layout_grammar.audit.models import AuditCode, AuditFinding, Severity
from layout_grammar.models import AspectRatio, BodyType
from layout_grammar.normalization import (
    ASPECT_RATIO_KEYS,
    BODY_TYPE_KEYS,
    CELL_WIDTH_KEYS,
    CONTENT_METADATA_KEYS,
    IMAGE_MODE_KEYS,
    as_number,
    normalize_cell_width,
    normalize_image_mode,
    pick,
)
from layout_grammar.reference_data import METADATA_COUNT_KEYS

BODY_TYPES = {bt.value for bt in BodyType}
SUPPORTED_RATIOS = {ar.value for ar in AspectRatio}


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


class CellDomainCheck(BaseAuditCheck):
    """Reports every cell field that falls outside its closed domain."""

    @property
    def name(self) -> str:
        return "CellDomainCheck"

    def check(self, block, block_width_px) -> list[AuditFinding]:
        findings = []
        for index, cell in enumerate(self._get_cells(block)):
            cell_id = self._cell_id(cell, index)
            findings.extend(self._check_body_type(cell, cell_id))
            findings.extend(self._check_width(cell, cell_id))
            findings.extend(self._check_aspect_ratio(cell, cell_id))
            findings.extend(self._check_image_mode(cell, cell_id))
            findings.extend(self._check_metadata(cell, cell_id))
        return findings

    def _check_body_type(self, cell, cell_id) -> list[AuditFinding]:
        raw = _enum_value(pick(cell, *BODY_TYPE_KEYS))
        if isinstance(raw, str) and raw in BODY_TYPES:
            return []
        return [self._finding(
            code=AuditCode.CELL_BODY_TYPE_UNKNOWN,
            severity=Severity.HIGH,
            message="Unknown element type; the cell is treated as a KPI",
            cell_id=cell_id,
            field="bodyType",
            suggestion=f"Use one of: {', '.join(sorted(BODY_TYPES))}",
            evidence=raw,
        )]

    def _check_width(self, cell, cell_id) -> list[AuditFinding]:
        raw = pick(cell, *CELL_WIDTH_KEYS)
        if raw is None or (as_number(raw) in (1.0, 2.0) and not isinstance(raw, str)):
            return []
        return [self._finding(
            code=AuditCode.CELL_WIDTH_OUT_OF_RANGE,
            severity=Severity.MEDIUM,
            message=f"Cell width must be 1 or 2; normalized to {normalize_cell_width(raw)}",
            cell_id=cell_id,
            field="cellWidth",
            evidence=raw,
        )]

    def _check_aspect_ratio(self, cell, cell_id) -> list[AuditFinding]:
        raw = _enum_value(pick(cell, *ASPECT_RATIO_KEYS))
        if raw is None or (isinstance(raw, str) and raw in SUPPORTED_RATIOS):
            return []
        return [self._finding(
            code=AuditCode.CELL_ASPECT_RATIO_UNSUPPORTED,
            severity=Severity.HIGH,
            message="Cell aspect ratio is not supported; 16:9 is used instead",
            cell_id=cell_id,
            field="aspectRatio",
            suggestion=f"Use one of: {', '.join(sorted(SUPPORTED_RATIOS))}",
            evidence=raw,
        )]

    def _check_image_mode(self, cell, cell_id) -> list[AuditFinding]:
        raw = pick(cell, *IMAGE_MODE_KEYS)
        if raw is None or normalize_image_mode(raw) is not None:
            return []
        return [self._finding(
            code=AuditCode.CELL_IMAGE_MODE_UNKNOWN,
            severity=Severity.MEDIUM,
            message="Unknown image mode; the image will not drive block height",
            cell_id=cell_id,
            field="imageMode",
            suggestion="Use 'cover' or 'setIntrinsic'",
            evidence=raw,
        )]

    def _check_metadata(self, cell, cell_id) -> list[AuditFinding]:
        raw = pick(cell, *CONTENT_METADATA_KEYS)
        if raw is None:
            return []
        if not isinstance(raw, Mapping):
            return [self._finding(
                code=AuditCode.CELL_METADATA_INVALID,
                severity=Severity.LOW,
                message="Content metadata must be an object; it is ignored",
                cell_id=cell_id,
                field="contentMetadata",
                evidence=raw,
            )]

        findings = []
        for key in METADATA_COUNT_KEYS:
            if key not in raw:
                continue
            number = as_number(raw[key])
            if number is None or number < 0:
                findings.append(self._finding(
                    code=AuditCode.CELL_METADATA_INVALID,
                    severity=Severity.LOW,
                    message=f"'{key}' must be a non-negative number; it is ignored",
                    cell_id=cell_id,
                    field=f"contentMetadata.{key}",
                    evidence=raw[key],
                ))
        return findings
