"""
Tests for YAML configuration handling
"""

import pytest
import yaml

from flowcube.core.config import (
    Config,
    PuzzleConfig,
    RenderConfig,
    SessionConfig,
    create_default_config,
    load_config,
    validate_config,
)


class TestConfigObjects:

    def test_defaults(self):
        config = Config()
        assert config.session.require_full_coverage
        assert config.render.figure_size == (4.0, 4.0)
        assert config.puzzle.layout == "easy"
        assert config.puzzle.puzzle_dir is None

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            RenderConfig(dpi=0)
        with pytest.raises(ValueError):
            RenderConfig(haze_alpha=2)
        with pytest.raises(ValueError):
            RenderConfig(figure_size=(4.0,))
        with pytest.raises(ValueError):
            SessionConfig(start_layer=-1)
        with pytest.raises(ValueError):
            PuzzleConfig(layout="")

    def test_relative_puzzle_dir_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = PuzzleConfig(puzzle_dir="puzzles")
        assert config.puzzle_dir == str(tmp_path / "puzzles")

    def test_from_dict_accepts_partial_sections(self):
        config = Config.from_dict({"render": {"dpi": 72, "figure_size": [3, 2]}})
        assert config.render.dpi == 72
        assert config.render.figure_size == (3, 2)
        assert config.session == SessionConfig()


class TestConfigFiles:

    def test_default_config_round_trip(self, tmp_path):
        path = tmp_path / "flowcube.yaml"
        created = create_default_config(str(path), layout="medium")
        loaded = load_config(str(path))
        assert loaded.to_dict() == created.to_dict()
        assert loaded.puzzle.layout == "medium"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValueError, match="empty"):
            load_config(str(path))

    def test_unknown_field(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"session": {"colour_blind": True}}))
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("session: [unclosed")
        with pytest.raises(yaml.YAMLError):
            load_config(str(path))


class TestValidateConfig:

    def test_default_config_is_clean(self):
        assert validate_config(Config()) == []

    def test_reports_problems(self, tmp_path):
        config = Config(
            session=SessionConfig(require_full_coverage=False),
            render=RenderConfig(dpi=20),
            puzzle=PuzzleConfig(layout="nope", puzzle_dir=str(tmp_path / "missing")),
        )
        issues = validate_config(config)
        assert "ERROR: Unknown layout 'nope'" in issues
        assert sum(issue.startswith("WARNING") for issue in issues) == 3
