"""
Core modules of flowcube.

This package contains the puzzle engine:
- Cell coordinates and directions
- Path state, results and errors
- The level grid and its preview overlay
- The drag-path commit algorithm
- Live gestures and the input-driven session
- Configuration management and the layout registry
"""

from flowcube.core.geometry import DIRECTIONS, Direction, Vec3, direction_between, move, neighbors
from flowcube.core.paths import (
    PALETTE,
    CommitResult,
    ErrorCode,
    FlowConsistencyError,
    InvalidGestureError,
    PathColor,
    PathRole,
    PathState,
)
from flowcube.core.level import Level, LevelLayout, LevelView, PreviewOverlay
from flowcube.core.commit import commit_gesture, sanitize_gesture, sever_flow
from flowcube.core.gesture import Gesture
from flowcube.core.config import Config, PuzzleConfig, RenderConfig, SessionConfig, load_config, create_default_config, validate_config
from flowcube.core.registry import LAYOUT_REGISTRY, register_layout
from flowcube.core.session import PuzzleSession

__all__ = [
    "DIRECTIONS",
    "Direction",
    "Vec3",
    "direction_between",
    "move",
    "neighbors",
    "PALETTE",
    "CommitResult",
    "ErrorCode",
    "FlowConsistencyError",
    "InvalidGestureError",
    "PathColor",
    "PathRole",
    "PathState",
    "Level",
    "LevelLayout",
    "LevelView",
    "PreviewOverlay",
    "commit_gesture",
    "sanitize_gesture",
    "sever_flow",
    "Gesture",
    "Config",
    "PuzzleConfig",
    "RenderConfig",
    "SessionConfig",
    "load_config",
    "create_default_config",
    "validate_config",
    "LAYOUT_REGISTRY",
    "register_layout",
    "PuzzleSession",
]
