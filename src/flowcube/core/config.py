"""
Configuration management for flowcube.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects for the session, the renderer and the
puzzle source.
"""

import os
import yaml
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SessionConfig:
    """Configuration for a puzzle session."""
    require_full_coverage: bool = True
    verbose: bool = False
    log_events: bool = False
    log_dir: str = "logs"
    start_layer: int = 0

    def __post_init__(self):
        if not isinstance(self.require_full_coverage, bool):
            raise ValueError("require_full_coverage must be a boolean")
        if not isinstance(self.start_layer, int) or self.start_layer < 0:
            raise ValueError("start_layer must be a non-negative integer")
        if not isinstance(self.log_dir, str) or not self.log_dir:
            raise ValueError("log_dir must be a non-empty string")


@dataclass
class RenderConfig:
    """Configuration for matplotlib rendering."""
    figure_size: Tuple[float, float] = (4.0, 4.0)
    dpi: int = 100
    show_committed_haze: bool = True
    haze_alpha: float = 0.25
    show_grid: bool = True

    def __post_init__(self):
        if not isinstance(self.figure_size, (tuple, list)) or len(self.figure_size) != 2:
            raise ValueError("figure_size must be a tuple of 2 numbers")
        self.figure_size = tuple(self.figure_size)
        if any(not isinstance(v, (int, float)) or v <= 0 for v in self.figure_size):
            raise ValueError("figure_size values must be positive numbers")
        if not isinstance(self.dpi, int) or self.dpi <= 0:
            raise ValueError("dpi must be a positive integer")
        if not isinstance(self.haze_alpha, (int, float)) or not 0 <= self.haze_alpha <= 1:
            raise ValueError("haze_alpha must be between 0 and 1")


@dataclass
class PuzzleConfig:
    """Where puzzles come from."""
    layout: str = "easy"
    puzzle_dir: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.layout, str) or not self.layout:
            raise ValueError("layout must be a non-empty string")
        if self.puzzle_dir is not None and not os.path.isabs(self.puzzle_dir):
            self.puzzle_dir = os.path.abspath(self.puzzle_dir)


@dataclass
class Config:
    """Main configuration object."""
    session: SessionConfig = field(default_factory=SessionConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    puzzle: PuzzleConfig = field(default_factory=PuzzleConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        session = SessionConfig(**(data.get("session") or {}))
        render = RenderConfig(**(data.get("render") or {}))
        puzzle = PuzzleConfig(**(data.get("puzzle") or {}))
        return cls(session=session, render=render, puzzle=puzzle)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        render = dict(self.render.__dict__)
        render["figure_size"] = list(self.render.figure_size)
        return {
            "session": dict(self.session.__dict__),
            "render": render,
            "puzzle": dict(self.puzzle.__dict__),
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If fields are missing or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "flowcube.yaml", layout: str = "easy") -> Config:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config
        layout: Layout name written into the puzzle section

    Returns:
        Default Config object
    """
    config = Config(puzzle=PuzzleConfig(layout=layout))

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    from flowcube.layouts import available_layouts

    issues = []

    if config.puzzle.puzzle_dir and not os.path.isdir(config.puzzle.puzzle_dir):
        issues.append(f"WARNING: Puzzle directory does not exist: {config.puzzle.puzzle_dir}")

    if config.puzzle.layout not in available_layouts(config.puzzle.puzzle_dir):
        issues.append(f"ERROR: Unknown layout '{config.puzzle.layout}'")

    if not config.session.require_full_coverage:
        issues.append("WARNING: Coverage is not required; puzzles are won once every color is connected")

    if config.render.dpi < 50:
        issues.append("WARNING: Render dpi below 50 produces unreadable images")

    return issues
