"""Layout policy configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class LayoutSettings(BaseSettings):
    """Process-wide layout policy, tunable without touching resolution logic."""

    # Height window
    MIN_HEIGHT_PX: int = 150
    MAX_HEIGHT_PX: int = 800
    READABILITY_BASELINE_PX: int = 300

    # Zero-width blocks are computed at this width
    MIN_COMPUTE_WIDTH_PX: float = 1.0

    # cellWidth 1 = half row, 2 = full row
    GRID_UNITS_PER_ROW: int = 2

    # Legibility thresholds
    TABLE_MAX_VISIBLE_ROWS: int = 17
    PIE_MIN_RADIUS_PX: int = 50
    PIE_LEGEND_GROWTH_THRESHOLD: int = 5
    BAR_DEFAULT_COUNT: int = 5
    BAR_MIN_CELL_WIDTH_PX: int = 160

    # Audit
    LARGE_BLOCK_WIDTH_PX: int = 10_000

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    model_config = {"env_prefix": "LAYOUT_GRAMMAR_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> LayoutSettings:
    return LayoutSettings()
