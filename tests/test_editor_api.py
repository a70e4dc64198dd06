"""
Tests for the editor validation gateway.

Covers normalization of raw blocks, height resolution through the API,
escalation to structural failure, and publish gating.

Run:
    python -m pytest tests/test_editor_api.py -v
"""

import pytest
from structlog.testing import capture_logs

from layout_grammar.config import LayoutSettings
from layout_grammar.editor_api import EditorValidationAPI, check_publish_validity
from layout_grammar.models import (
    AspectRatio,
    BlockHeightResolution,
    BlockValidationResult,
    BodyType,
    HeightResolutionPriority,
    ImageMode,
    RequiredAction,
)


def _result(block_id, blocked, reason=None):
    return BlockValidationResult(
        block_id=block_id,
        height_resolution=BlockHeightResolution(
            height_px=300,
            priority=HeightResolutionPriority.READABILITY_ENFORCEMENT,
            reason="Readability enforcement: content needs 300.0px",
            can_increase=True,
            requires_split=False,
        ),
        publish_blocked=blocked,
        publish_block_reason=reason,
    )


class TestScenarios:
    """Reference behaviours for common editor blocks."""

    def setup_method(self):
        self.api = EditorValidationAPI(LayoutSettings(_env_file=None))

    def test_single_kpi(self):
        result = self.api.validate_block({"blockId": "b1", "cells": [{"bodyType": "kpi"}]}, 1200)

        resolution = result.height_resolution
        assert resolution.priority is HeightResolutionPriority.READABILITY_ENFORCEMENT
        assert 150 <= resolution.height_px <= 800
        assert result.publish_blocked is False
        assert result.publish_block_reason is None

    def test_intrinsic_image(self):
        cell = {"bodyType": "image", "aspectRatio": "16:9", "imageMode": "setIntrinsic", "cellWidth": 1}
        result = self.api.validate_block({"cells": [cell]}, 1200)

        # Half of 1200px at 16:9
        assert result.height_resolution.priority is HeightResolutionPriority.INTRINSIC_MEDIA
        assert result.height_resolution.height_px == pytest.approx(337.5)
        assert result.publish_blocked is False

    def test_max_allowed_height_caps_kpi(self):
        result = self.api.validate_block({"maxAllowedHeight": 200, "cells": [{"bodyType": "kpi"}]}, 1200)

        assert result.height_resolution.height_px == 200
        assert result.height_resolution.requires_split is True
        assert result.required_actions == [RequiredAction.SPLIT_BLOCK]
        assert result.publish_blocked is False


class TestNormalizeBlock:

    def setup_method(self):
        self.api = EditorValidationAPI(LayoutSettings(_env_file=None))

    def test_alternate_spellings(self):
        data = self.api.normalize_block(
            {"block_id": "b2", "cells": [{"elementType": "table", "width": 2, "chart_id": "t1"}]},
            "900",
        )

        assert data.block_id == "b2"
        assert data.block_width == 900
        cell = data.cells[0]
        assert cell.body_type is BodyType.TABLE
        assert cell.cell_width == 2
        assert cell.chart_id == "t1"
        assert cell.aspect_ratio is None

    def test_missing_chart_id_uses_position(self):
        data = self.api.normalize_block({"cells": [{"bodyType": "pie"}, {"bodyType": "bar"}]}, 1200)

        assert [c.chart_id for c in data.cells] == ["cell-0", "cell-1"]

    def test_image_inherits_block_ratio(self):
        block = {
            "blockAspectRatio": {"ratio": "9:16"},
            "cells": [{"bodyType": "image", "imageMode": "cover"}],
        }
        data = self.api.normalize_block(block, 1200)

        assert data.cells[0].aspect_ratio is AspectRatio.PORTRAIT
        assert data.cells[0].image_mode is ImageMode.COVER
        assert data.block_aspect_ratio.is_soft_constraint is True

    def test_string_block_ratio(self):
        data = self.api.normalize_block({"blockAspectRatio": "1:1", "cells": []}, 1200)

        assert data.block_aspect_ratio.ratio is AspectRatio.SQUARE

    def test_unsupported_block_ratio_falls_back(self):
        block = {
            "blockAspectRatio": {"ratio": "4:3"},
            "cells": [{"bodyType": "image", "imageMode": "setIntrinsic"}],
        }
        result = self.api.validate_block(block, 1200)

        assert result.height_resolution.priority is HeightResolutionPriority.INTRINSIC_MEDIA
        assert result.height_resolution.height_px == pytest.approx(337.5)

    @pytest.mark.parametrize("block,width", [
        (None, 1200),
        ("block", "wide"),
        ({"cells": "not-a-list"}, -5),
        ({"cells": [None, 42, {"bodyType": ["pie"]}]}, float("nan")),
        ({"maxAllowedHeight": "tall", "blockAspectRatio": 7}, 1200),
    ])
    def test_garbage_never_raises(self, block, width):
        result = self.api.validate_block(block, width)

        assert result.height_resolution.height_px > 0
        assert 150 <= result.height_resolution.height_px <= 800

    def test_other_spelling_of_body_type_is_kpi(self):
        block = {
            "maxAllowedHeight": 400,
            "cells": [{"chartId": "c", "bodyType": "PIE", "contentMetadata": {"legendItemCount": 8}}],
        }
        result = self.api.validate_block(block, 1200)

        assert self.api.normalize_block(block, 1200).cells[0].body_type is BodyType.KPI
        assert result.height_resolution.priority is HeightResolutionPriority.READABILITY_ENFORCEMENT
        assert result.publish_blocked is False

    def test_rewritten_values_are_logged(self):
        block = {"blockId": "b9", "cells": [{"chartId": "d", "bodyType": "donut", "cellWidth": 7}]}
        with capture_logs() as logs:
            self.api.normalize_block(block, 1200)

        entries = [entry for entry in logs if entry["event"] == "block_normalized"]
        assert len(entries) == 1
        assert entries[0]["log_level"] == "debug"
        assert entries[0]["block_id"] == "b9"
        assert entries[0]["changed_fields"] == ["cells[0].bodyType", "cells[0].cellWidth"]

    def test_block_level_rewrites_are_logged(self):
        block = {"maxAllowedHeight": -5, "blockAspectRatio": {"ratio": "4:3"}, "cells": [None]}
        with capture_logs() as logs:
            self.api.normalize_block(block, "wide")

        changed = next(e for e in logs if e["event"] == "block_normalized")["changed_fields"]
        assert changed == ["blockWidth", "maxAllowedHeight", "blockAspectRatio.ratio", "cells[0]"]

    def test_clean_block_logs_nothing(self):
        block = {
            "blockId": "ok",
            "blockAspectRatio": {"ratio": "16:9", "isSoftConstraint": True},
            "cells": [{"chartId": "k", "bodyType": "kpi", "cellWidth": 1, "contentMetadata": {"rowCount": 3}}],
        }
        with capture_logs() as logs:
            self.api.normalize_block(block, 1200)

        assert [e for e in logs if e["event"] == "block_normalized"] == []


class TestValidateBlock:

    def setup_method(self):
        self.api = EditorValidationAPI(LayoutSettings(_env_file=None))

    def test_oversized_table_requires_aggregation(self):
        block = {"blockId": "t", "cells": [{"chartId": "t1", "bodyType": "table", "contentMetadata": {"rowCount": 25}}]}
        result = self.api.validate_block(block, 1200)

        assert result.publish_blocked is True
        assert result.required_actions == [RequiredAction.AGGREGATE]
        assert result.publish_block_reason.startswith("Cell 't1' does not fit")
        assert result.height_resolution.priority is HeightResolutionPriority.READABILITY_ENFORCEMENT

    def test_hard_ratio_too_short_for_pie(self):
        block = {
            "blockAspectRatio": {"ratio": "16:9", "isSoftConstraint": False},
            "cells": [{"chartId": "p1", "bodyType": "pie"}],
        }
        result = self.api.validate_block(block, 400)

        assert result.height_resolution.priority is HeightResolutionPriority.BLOCK_ASPECT_RATIO
        assert result.height_resolution.height_px == pytest.approx(225)
        assert result.publish_blocked is True
        assert result.publish_block_reason.startswith("Cell 'p1' does not fit")
        assert result.required_actions == [RequiredAction.INCREASE_HEIGHT]

    def test_unfixable_overflow_escalates(self):
        block = {
            "blockId": "pie-block",
            "maxAllowedHeight": 400,
            "cells": [{"chartId": "p1", "bodyType": "pie", "contentMetadata": {"legendItemCount": 8}}],
        }
        with capture_logs() as logs:
            result = self.api.validate_block(block, 1200)

        resolution = result.height_resolution
        assert resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE
        assert resolution.height_px == 400
        assert result.publish_blocked is True
        assert result.publish_block_reason.startswith("Structural failure")
        assert RequiredAction.SPLIT_BLOCK in result.required_actions

        events = [entry["event"] for entry in logs]
        assert "resolution_escalated" in events
        assert "publish_blocked" in events

    def test_bar_over_narrow_cap_is_split(self):
        block = {
            "maxAllowedHeight": 400,
            "cells": [{"chartId": "b", "bodyType": "bar", "contentMetadata": {"barCount": 10}}],
        }
        result = self.api.validate_block(block, 1200)

        # 488px of bars under a 400px cap: the block is split, bars stay in place
        assert result.height_resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE
        assert result.required_actions == [RequiredAction.INCREASE_HEIGHT, RequiredAction.SPLIT_BLOCK]

    def test_conflicting_max_height_is_structural(self):
        result = self.api.validate_block({"maxAllowedHeight": 100, "cells": [{"bodyType": "text"}]}, 1200)

        assert result.height_resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE
        assert result.publish_blocked is True

    def test_validations_follow_cell_order(self):
        block = {"cells": [
            {"chartId": "a", "bodyType": "kpi"},
            {"chartId": "b", "bodyType": "table", "contentMetadata": {"rowCount": 40}},
        ]}
        result = self.api.validate_block(block, 1200)

        assert [v.fits for v in result.element_validations] == [True, False]

    def test_validate_blocks_preserves_order(self):
        blocks = [{"blockId": str(i), "cells": [{"bodyType": "text"}]} for i in range(5)]
        results = self.api.validate_blocks(blocks, 1200)

        assert [r.block_id for r in results] == ["0", "1", "2", "3", "4"]

    def test_validate_blocks_tolerates_non_list(self):
        assert self.api.validate_blocks(None, 1200) == []


class TestPublishValidity:

    def test_all_clear(self):
        validity = check_publish_validity([_result("a", False), _result("b", False)])

        assert validity.can_publish is True
        assert validity.blocked_blocks == []

    def test_empty_input_can_publish(self):
        assert check_publish_validity([]).can_publish is True

    def test_blocked_blocks_in_order(self):
        results = [
            _result("a", True, "Cell 'x' does not fit"),
            _result("b", False),
            _result("c", True),
        ]
        validity = check_publish_validity(results)

        assert validity.can_publish is False
        assert [b.block_id for b in validity.blocked_blocks] == ["a", "c"]
        assert validity.blocked_blocks[0].reason == "Cell 'x' does not fit"
        assert validity.blocked_blocks[1].reason == "Structural failure"
