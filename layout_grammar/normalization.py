"""Normalization boundary — maps untrusted editor/persisted values into closed domains.

One function per field. None of them raise: every out-of-domain value maps
to a single stable default. Stale template records and malformed live edits
go through the same functions.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from pydantic import BaseModel

from layout_grammar.models import AspectRatio, BodyType, ImageMode
from layout_grammar.reference_data import DEFAULT_ASPECT_RATIO, METADATA_COUNT_KEYS

DEFAULT_BODY_TYPE = BodyType.KPI  # Always fits, safest stand-in

# Domains match exactly: "PIE" or " 1:1" are out of domain like any other string
_BODY_TYPES = {bt.value: bt for bt in BodyType}
_ASPECT_RATIOS = {ar.value: ar for ar in AspectRatio}
_IMAGE_MODES = {im.value: im for im in ImageMode}

# Raw spellings accepted for each field, editor names first
BLOCK_ID_KEYS = ("blockId", "block_id")
BLOCK_ASPECT_RATIO_KEYS = ("blockAspectRatio", "block_aspect_ratio")
SOFT_CONSTRAINT_KEYS = ("isSoftConstraint", "is_soft_constraint")
MAX_ALLOWED_HEIGHT_KEYS = ("maxAllowedHeight", "max_allowed_height")
CHART_ID_KEYS = ("chartId", "chart_id")
BODY_TYPE_KEYS = ("bodyType", "elementType", "body_type", "type")
CELL_WIDTH_KEYS = ("cellWidth", "width", "cell_width")
ASPECT_RATIO_KEYS = ("aspectRatio", "aspect_ratio")
IMAGE_MODE_KEYS = ("imageMode", "image_mode")
CONTENT_METADATA_KEYS = ("contentMetadata", "content_metadata")


def as_number(value: Any) -> Optional[float]:
    """Finite float from a number or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


def normalize_cell_width(value: Any) -> int:
    """Anything below 2 is a half-row cell, 2 and above a full-row cell.

    Integers compare exactly, however large, and +inf counts as 2 and above.
    """
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return 2 if value >= 2 else 1
    if isinstance(value, float) and math.isinf(value):
        return 2 if value > 0 else 1
    number = as_number(value)
    if number is not None and number >= 2:
        return 2
    return 1


def normalize_body_type(value: Any) -> BodyType:
    if isinstance(value, BodyType):
        return value
    if isinstance(value, str):
        return _BODY_TYPES.get(value, DEFAULT_BODY_TYPE)
    return DEFAULT_BODY_TYPE


def normalize_aspect_ratio(value: Any) -> AspectRatio:
    if isinstance(value, AspectRatio):
        return value
    if isinstance(value, str):
        return _ASPECT_RATIOS.get(value, DEFAULT_ASPECT_RATIO)
    return DEFAULT_ASPECT_RATIO


def normalize_image_mode(value: Any) -> Optional[ImageMode]:
    """Unknown modes fall back to plain (non-intrinsic) sizing."""
    if isinstance(value, ImageMode):
        return value
    if isinstance(value, str):
        return _IMAGE_MODES.get(value)
    return None


def normalize_soft_flag(value: Any) -> bool:
    """Only an explicit False makes a block ratio hard."""
    return value is not False


def normalize_block_width(value: Any) -> float:
    number = as_number(value)
    if number is None or number < 0:
        return 0.0
    return number


def normalize_max_allowed_height(value: Any) -> Optional[float]:
    number = as_number(value)
    if number is None or number <= 0:
        return None
    return number


def normalize_content_metadata(value: Any) -> Optional[dict[str, Any]]:
    """Keep metadata as given, with the known counts coerced to non-negative ints."""
    if not isinstance(value, Mapping):
        return None

    metadata = {str(key): item for key, item in value.items()}
    for key in METADATA_COUNT_KEYS:
        if key not in metadata:
            continue
        number = as_number(metadata[key])
        if number is None or number < 0:
            del metadata[key]
        else:
            metadata[key] = int(number)
    return metadata


def normalize_identifier(value: Any, fallback: str = "") -> str:
    if value is None:
        return fallback
    return value if isinstance(value, str) else str(value)


# ──────────────────────────────────────────────────────────────────────
# RAW ACCESS
# ──────────────────────────────────────────────────────────────────────


def as_mapping(value: Any) -> Mapping:
    """Read models and mappings alike; anything else reads as empty."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return value
    return {}


def pick(raw: Mapping, *keys: str) -> Any:
    """First present key, so both editor and persisted spellings are accepted."""
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def as_list(value: Any) -> list:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        return []
    return list(value)
