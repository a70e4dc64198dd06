"""Pure geometry shared by the height resolver and the fit validator.

Both sides must agree on how wide a cell is and how tall each chart type
needs to be, otherwise a block resolved for readability would fail its own
fit check.
"""

from typing import Optional

from layout_grammar.config import LayoutSettings
from layout_grammar.models import AspectRatio, CellConfiguration
from layout_grammar.reference_data import (
    ASPECT_RATIO_VALUES,
    BAR_LABEL_HEIGHT_PX,
    BAR_ROW_SPACING_PX,
    BAR_TRACK_MIN_HEIGHT_PX,
    CHART_BODY_PADDING_PX,
    DEFAULT_ASPECT_RATIO,
    PIE_SHARE,
    PIE_SHARE_GROWN_LEGEND,
    TABLE_HEADER_HEIGHT_PX,
    TABLE_ROW_HEIGHT_PX,
)


def aspect_ratio_value(ratio: Optional[AspectRatio]) -> float:
    """Numeric width/height for a ratio; missing ratio means 16:9."""
    return ASPECT_RATIO_VALUES[ratio or DEFAULT_ASPECT_RATIO]


def cell_width_px(cell_width: int, block_width: float, settings: LayoutSettings) -> float:
    """Pixel width of a cell: cellWidth units out of a full row."""
    return block_width * cell_width / settings.GRID_UNITS_PER_ROW


def metadata_count(cell: CellConfiguration, key: str, default: int = 0) -> int:
    """Read a non-negative count from content metadata."""
    value = (cell.content_metadata or {}).get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return default
    return max(0, int(value))


def table_required_height(row_count: int, settings: LayoutSettings) -> float:
    visible = min(row_count, settings.TABLE_MAX_VISIBLE_ROWS)
    return CHART_BODY_PADDING_PX + TABLE_HEADER_HEIGHT_PX + visible * TABLE_ROW_HEIGHT_PX


def pie_share(legend_item_count: int, settings: LayoutSettings) -> float:
    """Fraction of the cell height left for the pie itself."""
    if legend_item_count > settings.PIE_LEGEND_GROWTH_THRESHOLD:
        return PIE_SHARE_GROWN_LEGEND
    return PIE_SHARE


def pie_required_height(legend_item_count: int, settings: LayoutSettings) -> float:
    """Smallest cell height at which the pie keeps its minimum radius."""
    return round((2 * settings.PIE_MIN_RADIUS_PX) / pie_share(legend_item_count, settings), 2)


def bar_required_height(bar_count: int) -> float:
    """Padding + one row per bar + spacing between rows."""
    if bar_count <= 0:
        return 0.0
    row_height = max(BAR_LABEL_HEIGHT_PX, BAR_TRACK_MIN_HEIGHT_PX)
    return CHART_BODY_PADDING_PX + bar_count * row_height + (bar_count - 1) * BAR_ROW_SPACING_PX
