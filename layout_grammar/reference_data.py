"""Reference data — fixed geometry of the supported ratios and chart anatomy.

Tunable policy (height window, legibility thresholds) lives in
``layout_grammar.config``. The numbers here describe how charts are drawn
and only change when the renderer's stylesheet changes.
"""

from layout_grammar.models import AspectRatio

# ──────────────────────────────────────────────────────────────────────
# ASPECT RATIOS (width / height)
# ──────────────────────────────────────────────────────────────────────

ASPECT_RATIO_VALUES: dict[AspectRatio, float] = {
    AspectRatio.LANDSCAPE: 16 / 9,
    AspectRatio.PORTRAIT: 9 / 16,
    AspectRatio.SQUARE: 1.0,
}

DEFAULT_ASPECT_RATIO = AspectRatio.LANDSCAPE


# ──────────────────────────────────────────────────────────────────────
# CHART ANATOMY (px)
# ──────────────────────────────────────────────────────────────────────

# Chart body padding, top + bottom
CHART_BODY_PADDING_PX = 16

# Bar rows: 2-line label (16px font × 1.2 line height × 2) rounded up,
# bar track minimum, spacing between rows
BAR_LABEL_HEIGHT_PX = 40
BAR_TRACK_MIN_HEIGHT_PX = 20
BAR_ROW_SPACING_PX = 8

# Tables: header row plus fixed-height body rows
TABLE_HEADER_HEIGHT_PX = 40
TABLE_ROW_HEIGHT_PX = 32

# Pie cells stack title (30%), pie and legend. The pie keeps 40% of the
# cell; a long legend grows from 30% to 50%, leaving the pie 20%.
PIE_SHARE = 0.4
PIE_SHARE_GROWN_LEGEND = 0.2

# Keys read from CellConfiguration.content_metadata
ROW_COUNT_KEY = "rowCount"
BAR_COUNT_KEY = "barCount"
LEGEND_ITEM_COUNT_KEY = "legendItemCount"
METADATA_COUNT_KEYS = (ROW_COUNT_KEY, BAR_COUNT_KEY, LEGEND_ITEM_COUNT_KEY)
