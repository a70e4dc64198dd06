"""Shared fixtures for the layout grammar tests."""

import pytest

from layout_grammar.config import LayoutSettings
from layout_grammar.models import BodyType, CellConfiguration, HeightResolutionInput


@pytest.fixture
def settings():
    """Default policy, independent of the process environment."""
    return LayoutSettings(_env_file=None)


def make_cell(body_type, chart_id="c1", **kwargs):
    return CellConfiguration(chart_id=chart_id, body_type=BodyType(body_type), **kwargs)


def make_input(*cells, block_width=1200, **kwargs):
    return HeightResolutionInput(block_id="block", block_width=block_width, cells=cells, **kwargs)
