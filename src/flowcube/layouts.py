"""
Level layouts - built-in puzzles and a JSON loader for custom ones.

JSON layout format::

    {
      "name": "corner",
      "size": 3,
      "layers": 1,
      "difficulty": "easy",
      "starts": {"RED": [[0, 0, 0], [2, 2, 0]]},
      "obstacles": [[1, 1, 0]]
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from flowcube.core.geometry import Vec3
from flowcube.core.level import LevelLayout
from flowcube.core.paths import PathColor
from flowcube.core.registry import LAYOUT_REGISTRY, register_layout


def _cells(*coords: Tuple[int, int, int]) -> Tuple[Vec3, ...]:
    return tuple(Vec3(*c) for c in coords)


@register_layout("easy")
def easy() -> LevelLayout:
    """2x2x2 cube, two colors, each wrapping across both layers."""
    return LevelLayout(
        name="easy",
        size=2,
        difficulty="easy",
        starts={
            PathColor.RED: _cells((0, 0, 0), (0, 0, 1)),
            PathColor.BLUE: _cells((0, 1, 0), (0, 1, 1)),
        },
    )


@register_layout("medium")
def medium() -> LevelLayout:
    """3x3x3 cube, three colors."""
    return LevelLayout(
        name="medium",
        size=3,
        difficulty="medium",
        starts={
            PathColor.RED: _cells((0, 0, 0), (2, 2, 1)),
            PathColor.GREEN: _cells((2, 1, 1), (0, 2, 1)),
            PathColor.BLUE: _cells((0, 0, 2), (0, 2, 2)),
        },
    )


@register_layout("hard")
def hard() -> LevelLayout:
    """4x4 grid with two layers, four colors and two obstacles."""
    return LevelLayout(
        name="hard",
        size=4,
        layers=2,
        difficulty="hard",
        starts={
            PathColor.RED: _cells((0, 1, 0), (2, 1, 0)),
            PathColor.GREEN: _cells((0, 2, 0), (0, 3, 1)),
            PathColor.BLUE: _cells((0, 2, 1), (1, 0, 1)),
            PathColor.YELLOW: _cells((2, 1, 1), (3, 1, 1)),
        },
        obstacles=frozenset(_cells((1, 1, 0), (2, 2, 1))),
    )


@register_layout("demo")
def demo() -> LevelLayout:
    """Single 2x2 layer, one color on the diagonal."""
    return LevelLayout(
        name="demo",
        size=2,
        layers=1,
        difficulty="easy",
        starts={PathColor.RED: _cells((0, 0, 0), (1, 1, 0))},
    )


def layout_from_dict(data: Dict[str, Any], default_name: str = "custom") -> LevelLayout:
    """
    Build a LevelLayout from parsed JSON data.

    Raises:
        ValueError: missing keys, unknown colors or invalid cells
    """
    if not isinstance(data, dict):
        raise ValueError("Layout data must be an object")
    if "size" not in data or "starts" not in data:
        raise ValueError("Layout data needs 'size' and 'starts'")

    try:
        starts = {
            PathColor.from_name(name): tuple(Vec3.from_list(c) for c in coords)
            for name, coords in data["starts"].items()
        }
        obstacles = frozenset(Vec3.from_list(c) for c in data.get("obstacles", []))
    except (AttributeError, TypeError) as e:
        raise ValueError(f"Malformed layout cells: {e}")

    return LevelLayout(
        name=str(data.get("name", default_name)),
        size=data["size"],
        layers=data.get("layers"),
        difficulty=str(data.get("difficulty", "custom")),
        starts=starts,
        obstacles=obstacles,
    )


def load_layout_from_json(json_path: str) -> LevelLayout:
    """
    Load a layout from a JSON file.

    Args:
        json_path: path of the layout file

    Returns:
        LevelLayout named after the file unless the file names itself
    """
    path = Path(json_path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing layout {path}: {e}")
    return layout_from_dict(data, default_name=path.stem)


def find_all_layouts(base_dir: Optional[str]) -> List[Tuple[str, str]]:
    """
    Find layout files in a directory.

    Returns:
        [(layout_name, json_path), ...] sorted by name
    """
    if not base_dir:
        return []
    base_path = Path(base_dir)
    if not base_path.is_dir():
        return []
    return sorted(
        (json_path.stem, str(json_path))
        for json_path in base_path.glob('*.json')
        if not json_path.name.startswith('_')
    )


def available_layouts(puzzle_dir: Optional[str] = None) -> List[str]:
    """Names of the built-in layouts followed by those found in ``puzzle_dir``."""
    names = list(LAYOUT_REGISTRY)
    for name, _ in find_all_layouts(puzzle_dir):
        if name not in names:
            names.append(name)
    return names


def load_layout(name: str, puzzle_dir: Optional[str] = None) -> LevelLayout:
    """
    Load a layout by name: built-ins first, then ``<puzzle_dir>/<name>.json``.

    Raises:
        ValueError: no layout with that name
    """
    if name in LAYOUT_REGISTRY:
        return LAYOUT_REGISTRY[name]()
    for layout_name, json_path in find_all_layouts(puzzle_dir):
        if layout_name == name:
            return load_layout_from_json(json_path)
    raise ValueError(f"Unknown layout '{name}'. Available: {', '.join(available_layouts(puzzle_dir))}")
