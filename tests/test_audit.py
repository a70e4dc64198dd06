"""
Tests for the block audit engine and its checks.

Run:
    python -m pytest tests/test_audit.py -v
"""

from structlog.testing import capture_logs

from layout_grammar.audit import AuditCode, AuditEngine, BaseAuditCheck, Severity
from layout_grammar.audit.block_checks import BlockGeometryCheck
from layout_grammar.audit.capacity_check import CapacityCheck
from layout_grammar.audit.cell_checks import CellDomainCheck
from layout_grammar.config import LayoutSettings


def _codes(report):
    return {f.code for f in report.findings}


class _CrashingCheck(BaseAuditCheck):

    @property
    def name(self):
        return "CrashingCheck"

    def check(self, block, block_width_px):
        raise RuntimeError("boom")


class TestAuditEngine:

    def setup_method(self):
        self.settings = LayoutSettings(_env_file=None)
        self.engine = AuditEngine(self.settings)

    def test_clean_block(self):
        block = {"blockId": "b1", "cells": [{"chartId": "k", "bodyType": "kpi", "cellWidth": 1}]}
        report = self.engine.audit(block, 1200)

        assert report.clean is True
        assert report.findings == []
        assert report.block_id == "b1"

    def test_findings_sorted_by_severity(self):
        block = {
            "maxAllowedHeight": 100,
            "cells": [{"bodyType": "donut", "cellWidth": 3}],
        }
        report = self.engine.audit(block, 1200)

        severities = [f.severity for f in report.findings]
        assert severities[0] is Severity.CRITICAL
        assert severities == sorted(severities, key=list(Severity).index)
        assert report.clean is False
        assert report.summary["critical"] == 1

    def test_crashing_check_is_isolated(self):
        engine = AuditEngine(self.settings, checks=[_CrashingCheck(self.settings), CapacityCheck(self.settings)])
        block = {"cells": [{"bodyType": "kpi"}, {"bodyType": "kpi"}, {"bodyType": "kpi"}]}

        with capture_logs() as logs:
            report = engine.audit(block, 1200)

        assert _codes(report) == {AuditCode.AUDIT_CHECK_CRASHED, AuditCode.BLOCK_CAPACITY_EXCEEDED}
        assert any(entry["event"] == "audit_check_failed" for entry in logs)

    def test_add_and_remove_check(self):
        engine = AuditEngine(self.settings, checks=[])
        engine.add_check(CapacityCheck(self.settings))
        assert [c.name for c in engine.checks] == ["CapacityCheck"]

        engine.remove_check("CapacityCheck")
        assert engine.checks == []

    def test_non_mapping_block(self):
        report = self.engine.audit(None, 1200)

        assert _codes(report) == {AuditCode.BLOCK_EMPTY}
        assert report.clean is True


class TestBlockGeometryCheck:

    def setup_method(self):
        self.check = BlockGeometryCheck(LayoutSettings(_env_file=None))
        self.block = {"cells": [{"bodyType": "kpi"}]}

    def test_width_findings(self):
        assert self.check.check(self.block, "wide")[0].code is AuditCode.BLOCK_WIDTH_INVALID
        assert self.check.check(self.block, -1)[0].code is AuditCode.BLOCK_WIDTH_INVALID
        assert self.check.check(self.block, 0)[0].code is AuditCode.BLOCK_WIDTH_ZERO
        assert self.check.check(self.block, 20_000)[0].code is AuditCode.BLOCK_WIDTH_LARGE
        assert self.check.check(self.block, 1200) == []

    def test_max_height_findings(self):
        invalid = self.check.check({**self.block, "maxAllowedHeight": "tall"}, 1200)
        too_small = self.check.check({**self.block, "maxAllowedHeight": 100}, 1200)

        assert invalid[0].code is AuditCode.MAX_HEIGHT_INVALID
        assert invalid[0].evidence == "'tall'"
        assert too_small[0].code is AuditCode.MAX_HEIGHT_BELOW_MINIMUM
        assert too_small[0].severity is Severity.CRITICAL

    def test_unsupported_block_ratio(self):
        findings = self.check.check({**self.block, "blockAspectRatio": {"ratio": "4:3"}}, 1200)

        assert [f.code for f in findings] == [AuditCode.BLOCK_ASPECT_RATIO_UNSUPPORTED]

    def test_hard_ratio_overridden_by_media(self):
        block = {
            "blockAspectRatio": {"ratio": "16:9", "isSoftConstraint": False},
            "cells": [{"bodyType": "image", "imageMode": "setIntrinsic"}],
        }
        findings = self.check.check(block, 1200)

        assert [f.code for f in findings] == [AuditCode.HARD_ASPECT_IGNORED_BY_MEDIA]

    def test_empty_block(self):
        findings = self.check.check({"cells": []}, 1200)

        assert [f.code for f in findings] == [AuditCode.BLOCK_EMPTY]


class TestCellDomainCheck:

    def setup_method(self):
        self.check = CellDomainCheck(LayoutSettings(_env_file=None))

    def test_every_bad_field_is_reported(self):
        cell = {
            "bodyType": "donut",
            "cellWidth": 3,
            "aspectRatio": "4:3",
            "imageMode": "contain",
            "contentMetadata": {"rowCount": -1},
        }
        findings = self.check.check({"cells": [cell]}, 1200)

        assert {f.code for f in findings} == {
            AuditCode.CELL_BODY_TYPE_UNKNOWN,
            AuditCode.CELL_WIDTH_OUT_OF_RANGE,
            AuditCode.CELL_ASPECT_RATIO_UNSUPPORTED,
            AuditCode.CELL_IMAGE_MODE_UNKNOWN,
            AuditCode.CELL_METADATA_INVALID,
        }
        assert all(f.cell_id == "cell-0" for f in findings)

    def test_valid_cell(self):
        cell = {
            "chartId": "img",
            "bodyType": "image",
            "cellWidth": 2,
            "aspectRatio": "9:16",
            "imageMode": "cover",
            "contentMetadata": {"title": "Logo"},
        }

        assert self.check.check({"cells": [cell]}, 1200) == []

    def test_body_type_spelling_must_match_exactly(self):
        findings = self.check.check({"cells": [{"chartId": "p", "bodyType": "PIE"}]}, 1200)

        assert [f.code for f in findings] == [AuditCode.CELL_BODY_TYPE_UNKNOWN]

    def test_metadata_must_be_mapping(self):
        findings = self.check.check({"cells": [{"chartId": "t", "bodyType": "table", "contentMetadata": "25 rows"}]}, 1200)

        assert findings[0].code is AuditCode.CELL_METADATA_INVALID
        assert findings[0].cell_id == "t"


class TestCapacityCheck:

    def setup_method(self):
        self.check = CapacityCheck(LayoutSettings(_env_file=None))

    def test_full_row_fits(self):
        assert self.check.check({"cells": [{"cellWidth": 1}, {"cellWidth": 1}]}, 1200) == []

    def test_overfull_row(self):
        findings = self.check.check({"cells": [{"cellWidth": 2}, {"cellWidth": 1}]}, 1200)

        assert findings[0].code is AuditCode.BLOCK_CAPACITY_EXCEEDED
        assert findings[0].evidence == "3"
