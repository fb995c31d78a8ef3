"""
Tests for built-in layouts and the JSON layout loader
"""

import json

import pytest

from flowcube.core.geometry import Vec3
from flowcube.core.paths import PathColor
from flowcube.layouts import (
    available_layouts,
    find_all_layouts,
    layout_from_dict,
    load_layout,
    load_layout_from_json,
)


class TestBuiltinLayouts:

    def test_registered(self):
        assert available_layouts()[:3] == ["easy", "medium", "hard"]

    @pytest.mark.parametrize("name", ["easy", "medium", "hard"])
    def test_every_color_has_two_starts(self, name):
        layout = load_layout(name)
        assert layout.name == name
        assert layout.difficulty == name
        for pair in layout.starts.values():
            assert len(pair) == 2

    def test_hard_is_two_layers_deep(self):
        layout = load_layout("hard")
        assert layout.shape == (4, 4, 2)
        assert Vec3(1, 1, 0) in layout.obstacles

    def test_unknown_layout(self):
        with pytest.raises(ValueError, match="Unknown layout"):
            load_layout("nope")


class TestJsonLayouts:

    @pytest.fixture
    def puzzle_dir(self, tmp_path):
        data = {
            "size": 3,
            "layers": 1,
            "difficulty": "easy",
            "starts": {"red": [[0, 0, 0], [2, 2, 0]], "GREEN": [[2, 0, 0], [0, 2, 0]]},
            "obstacles": [[1, 1, 0]],
        }
        (tmp_path / "corner.json").write_text(json.dumps(data))
        (tmp_path / "_draft.json").write_text(json.dumps(data))
        (tmp_path / "broken.json").write_text("{not json")
        return tmp_path

    def test_find_all_layouts_skips_underscore_files(self, puzzle_dir):
        names = [name for name, _ in find_all_layouts(str(puzzle_dir))]
        assert names == ["broken", "corner"]

    def test_find_all_layouts_without_directory(self, tmp_path):
        assert find_all_layouts(None) == []
        assert find_all_layouts(str(tmp_path / "missing")) == []

    def test_load_by_name(self, puzzle_dir):
        layout = load_layout("corner", str(puzzle_dir))
        assert layout.name == "corner"
        assert layout.shape == (3, 3, 1)
        assert layout.starts[PathColor.RED] == (Vec3(0, 0, 0), Vec3(2, 2, 0))
        assert layout.obstacles == frozenset([Vec3(1, 1, 0)])
        assert "corner" in available_layouts(str(puzzle_dir))

    def test_malformed_json(self, puzzle_dir):
        with pytest.raises(ValueError, match="Error parsing layout"):
            load_layout_from_json(str(puzzle_dir / "broken.json"))

    def test_layout_from_dict_validation(self):
        with pytest.raises(ValueError):
            layout_from_dict([])
        with pytest.raises(ValueError):
            layout_from_dict({"size": 2})
        with pytest.raises(ValueError, match="Unknown color"):
            layout_from_dict({"size": 2, "starts": {"teal": [[0, 0, 0], [1, 1, 1]]}})
        with pytest.raises(ValueError):
            layout_from_dict({"size": 2, "starts": {"red": [[0, 0], [1, 1, 1]]}})
        with pytest.raises(ValueError):
            layout_from_dict({"size": 2, "starts": {"red": [[0, 0, 0], [3, 1, 1]]}})

    def test_demo_layout(self):
        layout = load_layout("demo")
        assert layout.shape == (2, 2, 1)
        assert layout.starts == {PathColor.RED: (Vec3(0, 0, 0), Vec3(1, 1, 0))}
