"""Editor Validation API — the gateway between untrusted block definitions and the core.

Normalizes every block, resolves its height once, checks every cell against
that height and aggregates the publish-gating decision. Nothing here raises
for bad input; bad values are normalized.

Usage:
    results = validate_blocks_for_editor(blocks, block_width_px=1200)
    validity = check_publish_validity(results)
    if not validity.can_publish:
        # Refuse to save; validity.blocked_blocks says why
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from layout_grammar.config import LayoutSettings, get_settings
from layout_grammar.fit import FitValidator
from layout_grammar.geometry import cell_width_px
from layout_grammar.height_resolver import HeightResolver
from layout_grammar.models import (
    BlockAspectRatioConstraint,
    BlockedBlock,
    BlockValidationResult,
    BodyType,
    CellConfiguration,
    HeightResolutionInput,
    HeightResolutionPriority,
    PublishValidityResult,
    RequiredAction,
    merge_actions,
)
from layout_grammar.normalization import (
    ASPECT_RATIO_KEYS,
    BLOCK_ASPECT_RATIO_KEYS,
    BLOCK_ID_KEYS,
    BODY_TYPE_KEYS,
    CELL_WIDTH_KEYS,
    CHART_ID_KEYS,
    CONTENT_METADATA_KEYS,
    IMAGE_MODE_KEYS,
    MAX_ALLOWED_HEIGHT_KEYS,
    SOFT_CONSTRAINT_KEYS,
    as_list,
    as_mapping,
    normalize_aspect_ratio,
    normalize_block_width,
    normalize_body_type,
    normalize_cell_width,
    normalize_content_metadata,
    normalize_identifier,
    normalize_image_mode,
    normalize_max_allowed_height,
    normalize_soft_flag,
    pick,
)
from layout_grammar.reference_data import DEFAULT_ASPECT_RATIO

logger = structlog.get_logger()

DEFAULT_BLOCK_REASON = "Structural failure"


class EditorValidationAPI:
    """Orchestrates normalization, height resolution and fit validation per block."""

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        resolver: Optional[HeightResolver] = None,
        validator: Optional[FitValidator] = None,
    ):
        self.settings = settings or get_settings()
        self.resolver = resolver or HeightResolver(self.settings)
        self.validator = validator or FitValidator(self.settings)

    # ── Normalization ──

    def normalize_cell(self, raw_cell: Any, index: int, block_ratio: Any = None) -> CellConfiguration:
        raw = as_mapping(raw_cell)
        body_type = normalize_body_type(pick(raw, *BODY_TYPE_KEYS))

        cell_ratio = pick(raw, *ASPECT_RATIO_KEYS)
        if cell_ratio is not None:
            aspect_ratio = normalize_aspect_ratio(cell_ratio)
        elif body_type is BodyType.IMAGE:
            # Images without their own ratio take the block's, else the default
            aspect_ratio = normalize_aspect_ratio(block_ratio) if block_ratio is not None else DEFAULT_ASPECT_RATIO
        else:
            aspect_ratio = None

        return CellConfiguration(
            chart_id=normalize_identifier(pick(raw, *CHART_ID_KEYS), fallback=f"cell-{index}"),
            cell_width=normalize_cell_width(pick(raw, *CELL_WIDTH_KEYS)),
            body_type=body_type,
            aspect_ratio=aspect_ratio,
            image_mode=normalize_image_mode(pick(raw, *IMAGE_MODE_KEYS)),
            content_metadata=normalize_content_metadata(pick(raw, *CONTENT_METADATA_KEYS)),
        )

    def normalize_block(self, block: Any, block_width_px: Any) -> HeightResolutionInput:
        raw = as_mapping(block)

        constraint = None
        raw_constraint = pick(raw, *BLOCK_ASPECT_RATIO_KEYS)
        block_ratio = None
        if raw_constraint is not None:
            if isinstance(raw_constraint, str):
                raw_constraint = {"ratio": raw_constraint}
            raw_constraint = as_mapping(raw_constraint)
            block_ratio = pick(raw_constraint, "ratio")
            constraint = BlockAspectRatioConstraint(
                ratio=normalize_aspect_ratio(block_ratio),
                is_soft_constraint=normalize_soft_flag(pick(raw_constraint, *SOFT_CONSTRAINT_KEYS)),
            )

        raw_cells = as_list(raw.get("cells"))
        cells = tuple(
            self.normalize_cell(raw_cell, index, block_ratio)
            for index, raw_cell in enumerate(raw_cells)
        )

        data = HeightResolutionInput(
            block_id=normalize_identifier(pick(raw, *BLOCK_ID_KEYS)),
            block_width=normalize_block_width(block_width_px),
            cells=cells,
            block_aspect_ratio=constraint,
            max_allowed_height=normalize_max_allowed_height(pick(raw, *MAX_ALLOWED_HEIGHT_KEYS)),
        )

        changed = self._changed_fields(raw, block_width_px, raw_constraint, raw_cells, data)
        if changed:
            logger.debug("block_normalized", block_id=data.block_id, changed_fields=changed)

        return data

    @staticmethod
    def _changed_fields(raw, block_width_px, raw_constraint, raw_cells, data: HeightResolutionInput) -> list[str]:
        """Paths of the authored values normalization replaced."""
        changed = []

        def note(path, value, normalized):
            if value is not None and value != normalized:
                changed.append(path)

        note("blockWidth", block_width_px, data.block_width)
        note("maxAllowedHeight", pick(raw, *MAX_ALLOWED_HEIGHT_KEYS), data.max_allowed_height)
        authored_constraint = pick(raw, *BLOCK_ASPECT_RATIO_KEYS)
        if authored_constraint is not None and not isinstance(authored_constraint, (str, Mapping, BaseModel)):
            changed.append("blockAspectRatio")
        elif raw_constraint is not None:
            constraint = data.block_aspect_ratio
            note("blockAspectRatio.ratio", pick(raw_constraint, "ratio"), constraint.ratio)
            soft = pick(raw_constraint, *SOFT_CONSTRAINT_KEYS)
            if soft is not None and not isinstance(soft, bool):
                changed.append("blockAspectRatio.isSoftConstraint")
        if raw.get("cells") is not None and not raw_cells:
            note("cells", raw.get("cells"), [])

        for index, (raw_cell, cell) in enumerate(zip(raw_cells, data.cells)):
            prefix = f"cells[{index}]"
            if not isinstance(raw_cell, (Mapping, BaseModel)):
                changed.append(prefix)
                continue
            cell_raw = as_mapping(raw_cell)
            note(f"{prefix}.bodyType", pick(cell_raw, *BODY_TYPE_KEYS), cell.body_type)
            note(f"{prefix}.cellWidth", pick(cell_raw, *CELL_WIDTH_KEYS), cell.cell_width)
            note(f"{prefix}.aspectRatio", pick(cell_raw, *ASPECT_RATIO_KEYS), cell.aspect_ratio)
            note(f"{prefix}.imageMode", pick(cell_raw, *IMAGE_MODE_KEYS), cell.image_mode)
            note(f"{prefix}.contentMetadata", pick(cell_raw, *CONTENT_METADATA_KEYS), cell.content_metadata)
        return changed

    # ── Operations ──

    def validate_block(self, block: Any, block_width_px: Any) -> BlockValidationResult:
        """Resolve one block's height and check every cell against it."""
        data = self.normalize_block(block, block_width_px)
        resolution = self.resolver.resolve(data)

        width = max(data.block_width, self.settings.MIN_COMPUTE_WIDTH_PX)
        validations = [
            self.validator.validate(
                cell,
                cell_width_px(cell.cell_width, width, self.settings),
                resolution.height_px,
            )
            for cell in data.cells
        ]

        # ── Validator-confirmed overflow no permitted height can fix ──
        _, upper = self.resolver.effective_bounds(data.max_allowed_height)
        overflowing = [
            (cell, v) for cell, v in zip(data.cells, validations)
            if not v.fits and v.required_height is not None and v.required_height > upper
        ]
        if overflowing and resolution.priority is not HeightResolutionPriority.STRUCTURAL_FAILURE:
            cell, validation = overflowing[0]
            resolution = self.resolver.escalate(
                resolution,
                f"cell '{cell.chart_id}' needs {validation.required_height:.0f}px, "
                f"above the {upper:g}px cap",
            )
            logger.warning(
                "resolution_escalated",
                block_id=data.block_id,
                chart_id=cell.chart_id,
                required_height=validation.required_height,
                cap=upper,
            )

        extra = [RequiredAction.SPLIT_BLOCK] if resolution.requires_split else []
        required_actions = merge_actions(*(v.required_actions for v in validations), extra)

        failing = [(cell, v) for cell, v in zip(data.cells, validations) if not v.fits]
        publish_blocked = resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE or bool(failing)

        reason = None
        if resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE:
            reason = resolution.reason
        elif failing:
            cell, validation = failing[0]
            reason = f"Cell '{cell.chart_id}' does not fit: {validation.violations[0]}"

        if publish_blocked:
            logger.info(
                "publish_blocked",
                block_id=data.block_id,
                priority=resolution.priority.name,
                failing_cells=[cell.chart_id for cell, _ in failing],
            )

        return BlockValidationResult(
            block_id=data.block_id,
            height_resolution=resolution,
            element_validations=validations,
            publish_blocked=publish_blocked,
            publish_block_reason=reason,
            required_actions=required_actions,
        )

    def validate_blocks(self, blocks: Any, block_width_px: Any) -> list[BlockValidationResult]:
        """Validate blocks independently, preserving order."""
        return [self.validate_block(block, block_width_px) for block in as_list(blocks)]

    @staticmethod
    def check_publish_validity(results: Iterable[BlockValidationResult]) -> PublishValidityResult:
        blocked = [
            BlockedBlock(block_id=r.block_id, reason=r.publish_block_reason or DEFAULT_BLOCK_REASON)
            for r in results
            if r.publish_blocked
        ]
        return PublishValidityResult(can_publish=not blocked, blocked_blocks=blocked)


# Module-level singleton
editor_validation_api = EditorValidationAPI()


def validate_block_for_editor(block: Any, block_width_px: Any) -> BlockValidationResult:
    return editor_validation_api.validate_block(block, block_width_px)


def validate_blocks_for_editor(blocks: Any, block_width_px: Any) -> list[BlockValidationResult]:
    return editor_validation_api.validate_blocks(blocks, block_width_px)


def check_publish_validity(results: Iterable[BlockValidationResult]) -> PublishValidityResult:
    return EditorValidationAPI.check_publish_validity(results)
