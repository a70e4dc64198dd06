"""Height Resolver — one authoritative pixel height per block.

Tiers are evaluated top-down and the first applicable tier wins:

    1. INTRINSIC_MEDIA          image cells with intrinsic sizing dictate height
    2. BLOCK_ASPECT_RATIO       a hard block ratio dictates height
    3. READABILITY_ENFORCEMENT  baseline + per-cell readable height
    4. STRUCTURAL_FAILURE       conflicting hard constraints / unfixable overflow

Usage:
    resolution = height_resolver.resolve(HeightResolutionInput(...))
"""

from typing import Optional

from layout_grammar.config import LayoutSettings, get_settings
from layout_grammar.geometry import (
    aspect_ratio_value,
    bar_required_height,
    cell_width_px,
    metadata_count,
    pie_required_height,
    table_required_height,
)
from layout_grammar.models import (
    BlockHeightResolution,
    BodyType,
    CellConfiguration,
    HeightResolutionInput,
    HeightResolutionPriority,
)
from layout_grammar.reference_data import BAR_COUNT_KEY, LEGEND_ITEM_COUNT_KEY, ROW_COUNT_KEY


class HeightResolver:
    """Resolves block heights from cells and constraints.

    Contract:
        - resolve() never raises for a well-typed HeightResolutionInput
        - heightPx > 0, and lies in [MIN_HEIGHT_PX, MAX_HEIGHT_PX] unless a
          maxAllowedHeight narrows the window
        - no state is kept between calls
    """

    def __init__(self, settings: Optional[LayoutSettings] = None):
        self.settings = settings or get_settings()

    def resolve(self, data: HeightResolutionInput) -> BlockHeightResolution:
        width = max(data.block_width, self.settings.MIN_COMPUTE_WIDTH_PX)
        lower, upper = self.effective_bounds(data.max_allowed_height)

        # ── 1. Intrinsic media ──
        intrinsic = [c for c in data.cells if c.is_intrinsic_media]
        if intrinsic:
            natural = max(
                cell_width_px(c.cell_width, width, self.settings) / aspect_ratio_value(c.aspect_ratio)
                for c in intrinsic
            )
            return self._bounded(
                natural,
                lower,
                upper,
                HeightResolutionPriority.INTRINSIC_MEDIA,
                f"Height set by intrinsic media: tallest of {len(intrinsic)} image cell(s) is {natural:.1f}px",
            )

        # ── 2. Hard block aspect ratio ──
        constraint = data.block_aspect_ratio
        if constraint is not None and not constraint.is_soft_constraint:
            ratio_height = width / aspect_ratio_value(constraint.ratio)
            return self._bounded(
                ratio_height,
                lower,
                upper,
                HeightResolutionPriority.BLOCK_ASPECT_RATIO,
                f"Height set by hard block aspect ratio {constraint.ratio.value}: {ratio_height:.1f}px",
            )

        # ── 3. Readability enforcement ──
        if upper < self.settings.MIN_HEIGHT_PX:
            return self.structural_failure(
                upper,
                f"maxAllowedHeight {upper:g}px is below the minimum readable height "
                f"{self.settings.MIN_HEIGHT_PX}px",
            )

        need = self.readability_need(data.cells)
        return self._bounded(
            need,
            lower,
            upper,
            HeightResolutionPriority.READABILITY_ENFORCEMENT,
            f"Readability enforcement: content needs {need:.1f}px",
        )

    def effective_bounds(self, max_allowed_height: Optional[float]) -> tuple[float, float]:
        """The (floor, cap) window a block height is clamped into."""
        upper = float(self.settings.MAX_HEIGHT_PX)
        if max_allowed_height is not None and max_allowed_height > 0:
            upper = min(upper, float(max_allowed_height))
        lower = min(float(self.settings.MIN_HEIGHT_PX), upper)
        return lower, upper

    def readability_need(self, cells) -> float:
        """Tallest readable height among the cells, never below the baseline."""
        return max(
            [float(self.settings.READABILITY_BASELINE_PX)] + [self._cell_need(c) for c in cells]
        )

    def _cell_need(self, cell: CellConfiguration) -> float:
        if cell.body_type is BodyType.TABLE:
            return table_required_height(metadata_count(cell, ROW_COUNT_KEY), self.settings)
        if cell.body_type is BodyType.PIE:
            return pie_required_height(metadata_count(cell, LEGEND_ITEM_COUNT_KEY), self.settings)
        if cell.body_type is BodyType.BAR:
            return bar_required_height(metadata_count(cell, BAR_COUNT_KEY, self.settings.BAR_DEFAULT_COUNT))
        # Text scales to its box, KPIs are compact, images follow their ratio
        return 0.0

    def _bounded(
        self,
        raw: float,
        lower: float,
        upper: float,
        priority: HeightResolutionPriority,
        reason: str,
    ) -> BlockHeightResolution:
        """Clamp a computed height into the window and derive the flags."""
        requires_split = raw >= upper
        if requires_split:
            height = upper
            reason += f"; capped at {upper:g}px, block must be split"
        elif raw < lower:
            height = lower
            reason += f"; raised to minimum {lower:g}px"
        else:
            height = raw

        # Media and hard ratios dictate the height; only readability may grow
        can_increase = (
            priority is HeightResolutionPriority.READABILITY_ENFORCEMENT
            and not requires_split
            and height < upper
        )
        return BlockHeightResolution(
            height_px=height,
            priority=priority,
            reason=reason,
            can_increase=can_increase,
            requires_split=requires_split,
        )

    @staticmethod
    def structural_failure(height_px: float, reason: str) -> BlockHeightResolution:
        return BlockHeightResolution(
            height_px=height_px,
            priority=HeightResolutionPriority.STRUCTURAL_FAILURE,
            reason=f"Structural failure: {reason}",
            can_increase=False,
            requires_split=True,
        )

    def escalate(self, resolution: BlockHeightResolution, reason: str) -> BlockHeightResolution:
        """Turn a resolution into a structural failure, keeping its height."""
        if resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE:
            return resolution
        return self.structural_failure(resolution.height_px, reason)


# Module-level singleton
height_resolver = HeightResolver()
