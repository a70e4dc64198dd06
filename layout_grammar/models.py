"""Layout grammar models — closed domains, resolution inputs and results.

All models are frozen: they are created per call, handed to the caller and
never mutated. Field names serialize to camelCase (``model_dump(by_alias=True)``)
so results can go straight back to the editor as JSON.
"""

from enum import Enum, IntEnum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

CellWidth = Literal[1, 2]


class BodyType(str, Enum):
    """Visual element kinds a cell can hold."""

    PIE = "pie"
    BAR = "bar"
    KPI = "kpi"
    TEXT = "text"
    IMAGE = "image"
    TABLE = "table"


class AspectRatio(str, Enum):
    """Supported width:height ratios."""

    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    SQUARE = "1:1"


class ImageMode(str, Enum):
    """How an image cell is sized."""

    COVER = "cover"
    SET_INTRINSIC = "setIntrinsic"  # Natural aspect ratio drives block height


class HeightResolutionPriority(IntEnum):
    """Resolution tiers, evaluated top-down. First applicable tier wins."""

    INTRINSIC_MEDIA = 1
    BLOCK_ASPECT_RATIO = 2
    READABILITY_ENFORCEMENT = 3
    STRUCTURAL_FAILURE = 4


class RequiredAction(str, Enum):
    """Fixed vocabulary of remedies an editor can apply."""

    AGGREGATE = "aggregate"
    INCREASE_HEIGHT = "increaseHeight"
    REFLOW = "reflow"
    SPLIT_BLOCK = "splitBlock"


def merge_actions(*groups) -> list[RequiredAction]:
    """Union of action groups, deduplicated, in vocabulary order."""
    present = {action for group in groups for action in group}
    return [action for action in RequiredAction if action in present]


class _Frozen(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}


# ──────────────────────────────────────────────────────────────────────
# INPUTS
# ──────────────────────────────────────────────────────────────────────


class CellConfiguration(_Frozen):
    """One visual element inside a block."""

    chart_id: str = Field(alias="chartId")
    cell_width: CellWidth = Field(default=1, alias="cellWidth")
    body_type: BodyType = Field(alias="bodyType")
    aspect_ratio: Optional[AspectRatio] = Field(default=None, alias="aspectRatio")
    image_mode: Optional[ImageMode] = Field(default=None, alias="imageMode")
    content_metadata: Optional[dict[str, Any]] = Field(default=None, alias="contentMetadata")

    @property
    def is_intrinsic_media(self) -> bool:
        return self.body_type is BodyType.IMAGE and self.image_mode is ImageMode.SET_INTRINSIC


class BlockAspectRatioConstraint(_Frozen):
    """Block-level ratio: hard constraints are honored, soft ones are advisory."""

    ratio: AspectRatio
    is_soft_constraint: bool = Field(alias="isSoftConstraint")


class HeightResolutionInput(_Frozen):
    """Strictly typed input to the height resolver."""

    block_id: str = Field(alias="blockId")
    block_width: float = Field(ge=0, alias="blockWidth")
    cells: tuple[CellConfiguration, ...] = ()
    block_aspect_ratio: Optional[BlockAspectRatioConstraint] = Field(default=None, alias="blockAspectRatio")
    max_allowed_height: Optional[float] = Field(default=None, gt=0, alias="maxAllowedHeight")


# ──────────────────────────────────────────────────────────────────────
# RESULTS
# ──────────────────────────────────────────────────────────────────────


class BlockHeightResolution(_Frozen):
    """The single authoritative height for a block and how it was reached."""

    height_px: float = Field(gt=0, alias="heightPx")
    priority: HeightResolutionPriority
    reason: str
    can_increase: bool = Field(alias="canIncrease")
    requires_split: bool = Field(alias="requiresSplit")


class ElementFitValidation(_Frozen):
    """Whether one cell's content is legible within its width × height budget."""

    fits: bool
    violations: list[str] = Field(default_factory=list)
    required_actions: list[RequiredAction] = Field(default_factory=list, alias="requiredActions")
    required_height: Optional[float] = Field(default=None, alias="requiredHeight")


class BlockValidationResult(_Frozen):
    """Resolution plus per-cell fit verdicts for one block."""

    block_id: str = Field(alias="blockId")
    height_resolution: BlockHeightResolution = Field(alias="heightResolution")
    element_validations: list[ElementFitValidation] = Field(default_factory=list, alias="elementValidations")
    publish_blocked: bool = Field(alias="publishBlocked")
    publish_block_reason: Optional[str] = Field(default=None, alias="publishBlockReason")
    required_actions: list[RequiredAction] = Field(default_factory=list, alias="requiredActions")


class BlockedBlock(_Frozen):
    block_id: str = Field(alias="blockId")
    reason: str


class PublishValidityResult(_Frozen):
    """Publish-gating decision across a batch of blocks."""

    can_publish: bool = Field(alias="canPublish")
    blocked_blocks: list[BlockedBlock] = Field(default_factory=list, alias="blockedBlocks")
