"""
Cell coordinates and the six unit-step directions of the cube.

Layer 0 is the top layer. IN moves one layer up (towards z=0) and OUT moves
one layer down, matching how the layer stack is displayed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Vec3:
    """Integer cell coordinate (x, y, z); z is the layer."""
    x: int
    y: int
    z: int

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def to_key(self) -> str:
        """String key used in JSON logs and layout files."""
        return f"{self.x},{self.y},{self.z}"

    @staticmethod
    def from_list(lst: List[int]) -> "Vec3":
        if len(lst) != 3:
            raise ValueError(f"Expected 3 coordinates, got {list(lst)}")
        return Vec3(int(lst[0]), int(lst[1]), int(lst[2]))

    @staticmethod
    def from_key(key: str) -> "Vec3":
        x, y, z = map(int, key.split(','))
        return Vec3(x, y, z)

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.z})"


class Direction(Enum):
    """Outgoing pointer of a path cell."""
    UP = (0, -1, 0)
    DOWN = (0, 1, 0)
    LEFT = (-1, 0, 0)
    RIGHT = (1, 0, 0)
    IN = (0, 0, -1)
    OUT = (0, 0, 1)

    @property
    def delta(self) -> Vec3:
        return Vec3(*self.value)

    @property
    def reverse(self) -> "Direction":
        return _REVERSE[self]

    @property
    def planar(self) -> bool:
        """True for the four in-layer directions."""
        return self.value[2] == 0

    @property
    def index(self) -> int:
        return DIRECTIONS.index(self)


DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)

_REVERSE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.IN: Direction.OUT,
    Direction.OUT: Direction.IN,
}


def move(direction: Direction, cell: Vec3) -> Vec3:
    """Step one cell in the given direction."""
    return cell + direction.delta


def direction_between(a: Vec3, b: Vec3) -> Optional[Direction]:
    """
    Direction that takes ``a`` to ``b`` in exactly one unit step.

    Returns None when the cells are not face-adjacent (including a == b).
    """
    diff = (b - a).to_tuple()
    for direction in DIRECTIONS:
        if direction.value == diff:
            return direction
    return None


def neighbors(cell: Vec3) -> Iterator[Tuple[Direction, Vec3]]:
    """Yield (direction, neighbor) for the six face neighbors of a cell."""
    for direction in DIRECTIONS:
        yield direction, move(direction, cell)
