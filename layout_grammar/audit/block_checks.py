"""Block geometry check — width, height ceiling, ratio constraint and emptiness."""

from layout_grammar.audit.base import BaseAuditCheck
from layout_grammar.audit.models import AuditCode, AuditFinding, Severity
from layout_grammar.models import AspectRatio, BodyType, ImageMode
from layout_grammar.normalization import (
    BODY_TYPE_KEYS,
    IMAGE_MODE_KEYS,
    MAX_ALLOWED_HEIGHT_KEYS,
    SOFT_CONSTRAINT_KEYS,
    as_number,
    normalize_body_type,
    normalize_image_mode,
    pick,
)

SUPPORTED_RATIOS = {ar.value for ar in AspectRatio}


class BlockGeometryCheck(BaseAuditCheck):
    """Audits the block-level values the height resolver depends on."""

    @property
    def name(self) -> str:
        return "BlockGeometryCheck"

    def check(self, block, block_width_px) -> list[AuditFinding]:
        findings = []
        findings.extend(self._check_width(block_width_px))
        findings.extend(self._check_max_height(block))
        findings.extend(self._check_constraint(block))

        if not self._get_cells(block):
            findings.append(self._finding(
                code=AuditCode.BLOCK_EMPTY,
                severity=Severity.LOW,
                message="Block has no cells; it resolves to the baseline readable height",
                field="cells",
            ))

        return findings

    def _check_width(self, block_width_px) -> list[AuditFinding]:
        width = as_number(block_width_px)

        if width is None or width < 0:
            return [self._finding(
                code=AuditCode.BLOCK_WIDTH_INVALID,
                severity=Severity.HIGH,
                message="Block width must be a non-negative number; it is treated as 0",
                field="blockWidth",
                evidence=block_width_px,
            )]
        if width == 0:
            return [self._finding(
                code=AuditCode.BLOCK_WIDTH_ZERO,
                severity=Severity.MEDIUM,
                message="Block width is 0; media and ratio heights fall back to the minimum height",
                field="blockWidth",
            )]
        if width > self.settings.LARGE_BLOCK_WIDTH_PX:
            return [self._finding(
                code=AuditCode.BLOCK_WIDTH_LARGE,
                severity=Severity.LOW,
                message=f"Block width {width:g}px is unusually large (>{self.settings.LARGE_BLOCK_WIDTH_PX}px)",
                field="blockWidth",
            )]
        return []

    def _check_max_height(self, block) -> list[AuditFinding]:
        raw = pick(block, *MAX_ALLOWED_HEIGHT_KEYS)
        if raw is None:
            return []

        height = as_number(raw)
        if height is None or height <= 0:
            return [self._finding(
                code=AuditCode.MAX_HEIGHT_INVALID,
                severity=Severity.MEDIUM,
                message="maxAllowedHeight must be a positive number; it is ignored",
                field="maxAllowedHeight",
                evidence=raw,
            )]
        if height < self.settings.MIN_HEIGHT_PX:
            return [self._finding(
                code=AuditCode.MAX_HEIGHT_BELOW_MINIMUM,
                severity=Severity.CRITICAL,
                message=(
                    f"maxAllowedHeight {height:g}px is below the minimum readable height "
                    f"{self.settings.MIN_HEIGHT_PX}px; the block cannot be resolved"
                ),
                field="maxAllowedHeight",
                suggestion=f"Raise maxAllowedHeight to at least {self.settings.MIN_HEIGHT_PX}px",
            )]
        return []

    def _check_constraint(self, block) -> list[AuditFinding]:
        constraint = self._get_constraint(block)
        if constraint is None:
            return []

        findings = []
        ratio = pick(constraint, "ratio")
        ratio_value = ratio.value if isinstance(ratio, AspectRatio) else ratio
        if not (isinstance(ratio_value, str) and ratio_value in SUPPORTED_RATIOS):
            findings.append(self._finding(
                code=AuditCode.BLOCK_ASPECT_RATIO_UNSUPPORTED,
                severity=Severity.HIGH,
                message="Block aspect ratio is not supported; 16:9 is used instead",
                field="blockAspectRatio.ratio",
                suggestion=f"Use one of: {', '.join(sorted(SUPPORTED_RATIOS))}",
                evidence=ratio,
            ))

        is_hard = pick(constraint, *SOFT_CONSTRAINT_KEYS) is False
        if is_hard and any(self._is_intrinsic(cell) for cell in self._get_cells(block)):
            findings.append(self._finding(
                code=AuditCode.HARD_ASPECT_IGNORED_BY_MEDIA,
                severity=Severity.MEDIUM,
                message="Hard block aspect ratio is overridden by intrinsic image height",
                field="blockAspectRatio",
                suggestion="Switch the images to cover mode or drop the block ratio",
            ))

        return findings

    @staticmethod
    def _is_intrinsic(cell) -> bool:
        body_type = normalize_body_type(pick(cell, *BODY_TYPE_KEYS))
        mode = normalize_image_mode(pick(cell, *IMAGE_MODE_KEYS))
        return body_type is BodyType.IMAGE and mode is ImageMode.SET_INTRINSIC
