"""
Shared fixtures for the flowcube tests.
"""

import pytest

from flowcube.core.geometry import Vec3
from flowcube.core.level import Level
from flowcube.core.paths import PathColor
from flowcube.layouts import load_layout


def cells(*coords):
    return [Vec3(*c) for c in coords]


# Known full-coverage solutions of the built-in layouts
SOLUTIONS = {
    "easy": {
        PathColor.RED: cells((0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)),
        PathColor.BLUE: cells((0, 1, 0), (1, 1, 0), (1, 1, 1), (0, 1, 1)),
    },
    "medium": {
        PathColor.RED: cells((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (1, 1, 0),
                             (0, 1, 0), (0, 2, 0), (1, 2, 0), (2, 2, 0), (2, 2, 1)),
        PathColor.GREEN: cells((2, 1, 1), (2, 0, 1), (1, 0, 1), (0, 0, 1),
                               (0, 1, 1), (1, 1, 1), (1, 2, 1), (0, 2, 1)),
        PathColor.BLUE: cells((0, 0, 2), (1, 0, 2), (2, 0, 2), (2, 1, 2), (2, 2, 2),
                              (1, 2, 2), (1, 1, 2), (0, 1, 2), (0, 2, 2)),
    },
    "hard": {
        PathColor.RED: cells((0, 1, 0), (0, 0, 0), (1, 0, 0), (2, 0, 0),
                             (3, 0, 0), (3, 1, 0), (2, 1, 0)),
        PathColor.GREEN: cells((0, 2, 0), (0, 3, 0), (1, 3, 0), (1, 2, 0), (2, 2, 0),
                               (2, 3, 0), (3, 3, 0), (3, 2, 0), (3, 2, 1), (3, 3, 1),
                               (2, 3, 1), (1, 3, 1), (0, 3, 1)),
        PathColor.BLUE: cells((0, 2, 1), (1, 2, 1), (1, 1, 1), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        PathColor.YELLOW: cells((2, 1, 1), (2, 0, 1), (3, 0, 1), (3, 1, 1)),
    },
}


@pytest.fixture
def demo_layout():
    """Single 2x2 layer with one RED pair on the diagonal."""
    return load_layout("demo")


@pytest.fixture
def demo_level(demo_layout):
    return Level(demo_layout)


@pytest.fixture
def easy_level():
    return Level(load_layout("easy"))


@pytest.fixture
def hard_level():
    return Level(load_layout("hard"))


@pytest.fixture
def solutions():
    return SOLUTIONS


def _assert_consistent(view):
    """Every flow is a simple path and flows never share a cell."""
    owners = {}
    for color in view.colors:
        flow = view.flow_of(color) or []
        assert len(flow) == len(set(flow))
        for cell in flow:
            assert cell not in owners
            owners[cell] = color
        for cell in view.segments_of(color):
            assert cell in flow


@pytest.fixture
def assert_consistent():
    return _assert_consistent
