"""
Puzzle session: turns press/drag/release/scroll events into committed flows.

Every event handler runs under one re-entrant lock, and renderers read through
``reading()``, so a frame never sees a level halfway through a commit. While a
drag is in progress the renderer is handed a preview overlay instead of the
committed level.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from flowcube.core.commit import commit_gesture
from flowcube.core.config import SessionConfig
from flowcube.core.geometry import Direction, Vec3
from flowcube.core.gesture import Gesture
from flowcube.core.level import Level, LevelView, PreviewOverlay
from flowcube.core.paths import CommitResult, InvalidGestureError, PathColor
from flowcube.utils.logger import SessionLogger


class PuzzleSession:
    """One player working on one level."""

    def __init__(
        self,
        level: Level,
        config: Optional[SessionConfig] = None,
        logger: Optional[SessionLogger] = None,
    ):
        self.level = level
        self.config = config or SessionConfig()
        if logger is None and self.config.log_events:
            logger = SessionLogger(self.config.log_dir, level.layout.name)
        self.logger = logger
        self.layer: int = min(self.config.start_layer, level.layers - 1)
        self.gesture: Optional[Gesture] = None
        self.preview: Optional[PreviewOverlay] = None
        self.preview_result: Optional[CommitResult] = None
        self.last_result: Optional[CommitResult] = None
        self.won: bool = False
        self.step_count: int = 0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #
    @property
    def dragging(self) -> bool:
        return self.gesture is not None

    def view(self) -> LevelView:
        """The preview overlay while dragging, otherwise the committed level."""
        return self.preview if self.preview is not None else self.level

    @contextmanager
    def reading(self) -> Iterator[LevelView]:
        """Hold the session lock for a whole render pass."""
        with self._lock:
            yield self.view()

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            view = self.view()
            return {
                "layout": self.level.layout.name,
                "size": self.level.size,
                "layers": self.level.layers,
                "layer": self.layer,
                "occupied": view.occupied_count(),
                "drawable": view.drawable_count(),
                "connected": [c.name for c in view.colors if view.is_connected(c)],
                "colors": [c.name for c in view.colors],
                "dragging": self.dragging,
                "gesture": [c.to_tuple() for c in self.gesture] if self.gesture else [],
                "won": self.won,
            }

    def flows(self) -> Dict[PathColor, Optional[List[Vec3]]]:
        with self._lock:
            view = self.view()
            return {color: view.flow_of(color) for color in view.colors}

    # ------------------------------------------------------------------ #
    # Input events
    # ------------------------------------------------------------------ #
    def on_pressed(self, cell: Optional[Vec3]) -> bool:
        """
        Start a drag.

        Pressing a START begins a fresh gesture for its color. Pressing a
        SEGMENT picks that color's flow back up, trimmed to the pressed cell.
        Empty cells, obstacles and cells off the grid are ignored.

        Returns:
            True if a drag started
        """
        with self._lock:
            state = self.level.path_at(cell)
            if state is None:
                return False

            self.layer = cell.z
            if state.is_start:
                self.gesture = Gesture([cell])
            else:
                self.gesture = Gesture(self.level.flow_of(state.color))
                self.gesture.extend(cell)
            self._refresh_preview()
            self._log("press", cell=cell.to_tuple(), color=state.color.name)
            return True

    def on_dragged(self, cell: Optional[Vec3]) -> bool:
        """Move the pointer during a drag. Returns True if the gesture changed."""
        with self._lock:
            if self.gesture is None or cell is None:
                return False
            if not self.gesture.extend(cell):
                return False
            self._refresh_preview()
            self._log("drag", cell=cell.to_tuple(), length=len(self.gesture))
            return True

    def on_released(self) -> bool:
        """
        Finish a drag: commit the gesture and evaluate the win condition.

        Returns:
            Whether the puzzle is currently won
        """
        with self._lock:
            if self.gesture is not None:
                cells = self.gesture.cells
                self.cancel()
                self._log("release", length=len(cells))
                self.commit(cells)
            return self._update_won()

    def on_layer_scroll(self, direction: Direction, cell: Optional[Vec3] = None) -> int:
        """
        Change the active layer (IN is up, OUT is down).

        During a drag the pointer cell is carried to the new layer, which is
        only allowed when the cell across is drawable or already holds the
        color being drawn.

        Returns:
            The active layer after the scroll
        """
        if direction not in (Direction.IN, Direction.OUT):
            raise ValueError(f"Layer scroll needs IN or OUT, got {direction}")

        with self._lock:
            target = self.layer + direction.delta.z
            allowed = 0 <= target < self.level.layers

            if allowed and self.gesture is not None:
                if cell is None:
                    allowed = False
                else:
                    across = Vec3(cell.x, cell.y, target)
                    view = self.view()
                    across_state = view.path_at(across)
                    color = self.level.path_at(self.gesture.first).color
                    allowed = view.is_drawable(across) or (
                        across_state is not None and across_state.color is color
                    )

            if allowed:
                self.layer = target
                self._log("scroll", layer=self.layer)

            if self.gesture is not None and cell is not None:
                self.on_dragged(Vec3(cell.x, cell.y, self.layer))
            return self.layer

    # ------------------------------------------------------------------ #
    # Direct edits
    # ------------------------------------------------------------------ #
    def commit(self, gesture: Sequence[Vec3]) -> CommitResult:
        """
        Commit a gesture against the level in one step.

        The gesture is first applied to an overlay and then flushed, so an
        InvalidGestureError leaves the level untouched.
        """
        with self._lock:
            overlay = self.level.overlay()
            try:
                result = commit_gesture(overlay, list(gesture))
            except InvalidGestureError as exc:
                self._log("error", error=str(exc))
                raise
            overlay.apply()
            if self.gesture is not None:
                self._refresh_preview()
            self.last_result = result
            self._log("commit", **result.to_dict())
            return result

    def clear_color(self, color: PathColor) -> None:
        with self._lock:
            self.cancel()
            self.level.clear_color(color)
            self._log("commit", message=f"{color.name} flow erased", color=color.name)
            self._update_won()

    def cancel(self) -> None:
        """Drop the live gesture without committing it."""
        with self._lock:
            self.gesture = None
            self.preview = None
            self.preview_result = None

    def reset(self) -> None:
        with self._lock:
            self.cancel()
            self.level.reset()
            self.won = False
            self.last_result = None
            self._log("reset", layout=self.level.layout.name)

    def close(self) -> Optional[str]:
        """Save the event log, if one is attached. Returns the log path."""
        if self.logger is None:
            return None
        return self.logger.save_logs()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _refresh_preview(self) -> None:
        overlay = self.level.overlay()
        self.preview_result = commit_gesture(overlay, self.gesture.cells)
        self.preview = overlay

    def _update_won(self) -> bool:
        won = self.level.check_win(self.config.require_full_coverage)
        if won and not self.won:
            self._log("win", layout=self.level.layout.name)
        self.won = won
        return won

    def _log(self, step_type: str, **data: Any) -> None:
        self.step_count += 1
        if self.logger is not None:
            self.logger.log_step(
                self.step_count,
                {"step_type": step_type, **data},
                verbose=self.config.verbose,
            )
