"""
Path state attached to cells, plus result and error types of the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from flowcube.core.geometry import Direction, Vec3


class PathColor(Enum):
    """Flow palette: (rgb, symbol)."""
    RED = ((220, 40, 40), "R")
    GREEN = ((40, 170, 60), "G")
    BLUE = ((50, 90, 230), "B")
    YELLOW = ((235, 215, 40), "Y")
    ORANGE = ((245, 140, 30), "O")
    CYAN = ((40, 210, 220), "C")
    MAGENTA = ((220, 50, 200), "M")
    MAROON = ((130, 30, 40), "N")
    PURPLE = ((120, 50, 170), "P")
    WHITE = ((235, 235, 235), "W")
    GRAY = ((140, 140, 140), "A")
    LIME = ((160, 230, 60), "L")

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.value[0]

    @property
    def symbol(self) -> str:
        return self.value[1]

    @property
    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self.rgb)

    @property
    def index(self) -> int:
        return PALETTE.index(self)

    @staticmethod
    def from_name(name: str) -> "PathColor":
        try:
            return PathColor[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown color '{name}'") from None


PALETTE: Tuple[PathColor, ...] = tuple(PathColor)


class PathRole(Enum):
    START = "start"
    SEGMENT = "segment"


@dataclass(frozen=True)
class PathState:
    """What a single cell holds: color, role and the pointer to the next cell."""
    color: PathColor
    role: PathRole
    direction: Optional[Direction] = None

    @property
    def is_start(self) -> bool:
        return self.role is PathRole.START

    def with_direction(self, direction: Optional[Direction]) -> "PathState":
        return PathState(self.color, self.role, direction)


class ErrorCode(Enum):
    """Outcome codes reported on commit and tool results."""
    OK = "OK"
    INVALID_GESTURE = "InvalidGesture"
    DEAD_END = "DeadEnd"
    NOT_CONNECTED = "NotConnected"


class InvalidGestureError(ValueError):
    """A gesture is empty or does not begin on a START cell."""


class FlowConsistencyError(AssertionError):
    """An internal invariant of the path network is broken."""


@dataclass
class CommitResult:
    """Result of reconciling a gesture into a level."""
    color: PathColor
    flow: List[Vec3] = field(default_factory=list)
    connected: bool = False
    erased: bool = False
    severed: List[PathColor] = field(default_factory=list)
    dropped: List[Vec3] = field(default_factory=list)
    error: ErrorCode = ErrorCode.OK
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "color": self.color.name,
            "flow": [c.to_tuple() for c in self.flow],
            "connected": self.connected,
            "erased": self.erased,
            "severed": [c.name for c in self.severed],
            "dropped": [c.to_tuple() for c in self.dropped],
            "error": self.error.value,
            "message": self.message,
        }
