"""
Tool-call environment around a puzzle session.

Scripts, agents and the CLI drive a session through named tools whose results
are plain dictionaries, so a failing call reports an error instead of
unwinding the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from PIL import Image

from flowcube.core.config import Config
from flowcube.core.geometry import Direction, Vec3
from flowcube.core.level import Level
from flowcube.core.paths import ErrorCode, InvalidGestureError, PathColor
from flowcube.core.session import PuzzleSession
from flowcube.layouts import available_layouts, load_layout
from flowcube.render.ascii import ascii_level
from flowcube.render.visualizer import render_image


def _to_vec3(coords: List[int]) -> Vec3:
    return Vec3.from_list(coords)


class FlowEnvironment:
    """Named-tool wrapper around a PuzzleSession."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.session: Optional[PuzzleSession] = None
        self.current_layout: str = self.config.puzzle.layout
        self._tool_handlers = {
            "state": self._tool_state,
            "press": self._tool_press,
            "drag": self._tool_drag,
            "release": self._tool_release,
            "scroll": self._tool_scroll,
            "flow": self._tool_flow,
            "clear": self._tool_clear,
            "reset": self._tool_reset,
            "load": self._tool_load,
            "layouts": self._tool_layouts,
        }

    # ------------------------------------------------------------------ #
    # Environment API
    # ------------------------------------------------------------------ #
    def reset(self, layout: Optional[str] = None) -> Dict[str, Any]:
        """Load a layout (the configured one by default) into a fresh session."""
        name = layout or self.current_layout
        level_layout = load_layout(name, self.config.puzzle.puzzle_dir)
        self.close()
        self.current_layout = name
        self.session = PuzzleSession(Level(level_layout), self.config.session)
        return self._tool_state()

    def execute_tool_call(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Dispatch tool calls."""
        handler = self._tool_handlers.get(tool_name)
        if not handler:
            return {"status": "error", "message": f"Unknown tool '{tool_name}'"}
        try:
            return handler(**(arguments or {}))
        except InvalidGestureError as exc:
            return {"status": "error", "message": str(exc), "error": ErrorCode.INVALID_GESTURE.value}
        except (TypeError, ValueError, KeyError) as exc:
            return {"status": "error", "message": f"Tool '{tool_name}' failed: {exc}"}

    def get_tool_names(self) -> List[str]:
        return list(self._tool_handlers)

    def render(self) -> Image.Image:
        """Render the current (preview or committed) state to a PIL image."""
        if not self.session:
            width, height = self.config.render.figure_size
            dpi = self.config.render.dpi
            return Image.new("RGB", (int(width * dpi), int(height * dpi)), color="white")
        with self.session.reading() as view:
            committed = self.session.level if self.session.dragging else None
            return render_image(view, committed=committed, title=self.current_layout,
                                config=self.config.render)

    def describe(self, layer: Optional[int] = None) -> str:
        """Text view of the current state."""
        if not self.session:
            return "No puzzle loaded."
        with self.session.reading() as view:
            return ascii_level(view, layer)

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
        self.session = None

    # ------------------------------------------------------------------ #
    # Tool implementations
    # ------------------------------------------------------------------ #
    def _require_session(self) -> PuzzleSession:
        if self.session is None:
            raise ValueError("No puzzle loaded")
        return self.session

    def _tool_state(self) -> Dict[str, Any]:
        session = self._require_session()
        return {"status": "success", "message": "State retrieved", "state": session.summary()}

    def _tool_press(self, cell: List[int]) -> Dict[str, Any]:
        session = self._require_session()
        if not session.on_pressed(_to_vec3(cell)):
            return {"status": "error", "message": f"Nothing to drag at {tuple(cell)}"}
        return {"status": "success", "message": "Drag started", "gesture": session.summary()["gesture"]}

    def _tool_drag(self, cells: List[List[int]]) -> Dict[str, Any]:
        session = self._require_session()
        if not session.dragging:
            return {"status": "error", "message": "No drag in progress"}
        for coords in cells:
            session.on_dragged(_to_vec3(coords))
        result = session.preview_result
        return {
            "status": "success",
            "message": result.message if result else "Dragged",
            "gesture": session.summary()["gesture"],
        }

    def _tool_release(self) -> Dict[str, Any]:
        session = self._require_session()
        was_dragging = session.dragging
        won = session.on_released()
        result = session.last_result if was_dragging else None
        return {
            "status": "success",
            "message": result.message if result else "Nothing to commit",
            "result": result.to_dict() if result else None,
            "won": won,
        }

    def _tool_scroll(self, direction: str, cell: Optional[List[int]] = None) -> Dict[str, Any]:
        session = self._require_session()
        try:
            scroll = Direction[direction.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown scroll direction '{direction}'") from None
        layer = session.on_layer_scroll(scroll, _to_vec3(cell) if cell is not None else None)
        return {"status": "success", "message": f"Layer {layer}", "layer": layer}

    def _tool_flow(self, color: str) -> Dict[str, Any]:
        session = self._require_session()
        path_color = PathColor.from_name(color)
        with session.reading() as view:
            flow = view.flow_of(path_color)
            connected = view.is_connected(path_color)
        return {
            "status": "success",
            "message": f"{path_color.name} flow",
            "flow": [c.to_tuple() for c in flow] if flow else None,
            "connected": connected,
        }

    def _tool_clear(self, color: str) -> Dict[str, Any]:
        session = self._require_session()
        path_color = PathColor.from_name(color)
        session.clear_color(path_color)
        return {"status": "success", "message": f"{path_color.name} flow erased"}

    def _tool_reset(self) -> Dict[str, Any]:
        self._require_session().reset()
        return {"status": "success", "message": "Level reset"}

    def _tool_load(self, layout: str) -> Dict[str, Any]:
        state = self.reset(layout)
        state["message"] = f"Loaded layout '{layout}'"
        return state

    def _tool_layouts(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "message": "Available layouts",
            "layouts": available_layouts(self.config.puzzle.puzzle_dir),
        }
