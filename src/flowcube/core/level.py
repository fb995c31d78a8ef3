"""
Level grid, its queries and the low-level mutators used by the commit algorithm.

Only the forward pointer of each path cell is stored. Predecessors are found
by looking at the six neighbors, so there is no back pointer to keep in sync.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

import numpy as np

from flowcube.core.geometry import DIRECTIONS, Direction, Vec3, move, neighbors
from flowcube.core.paths import (
    PALETTE, FlowConsistencyError, PathColor, PathRole, PathState
)

_ROLE_NONE = 0
_ROLE_START = 1
_ROLE_SEGMENT = 2
_NONE = -1


@dataclass(frozen=True)
class LevelLayout:
    """Static puzzle layout: grid size, START pairs and obstacles."""
    name: str
    size: int
    starts: Dict[PathColor, Tuple[Vec3, Vec3]]
    obstacles: FrozenSet[Vec3] = field(default_factory=frozenset)
    layers: Optional[int] = None
    difficulty: str = "custom"

    def __post_init__(self):
        if not isinstance(self.size, int) or self.size <= 0:
            raise ValueError("size must be a positive integer")
        if self.layers is None:
            object.__setattr__(self, "layers", self.size)
        if not isinstance(self.layers, int) or self.layers <= 0:
            raise ValueError("layers must be a positive integer")
        object.__setattr__(self, "obstacles", frozenset(self.obstacles))

        used = set()
        for cell in self.obstacles:
            if not self.contains(cell):
                raise ValueError(f"Obstacle {cell} is outside the {self.shape} grid")
            used.add(cell)
        for color, pair in self.starts.items():
            if not isinstance(color, PathColor):
                raise ValueError(f"Unknown color {color!r}")
            if len(pair) != 2:
                raise ValueError(f"{color.name} needs exactly 2 START cells, got {len(pair)}")
            for cell in pair:
                if not self.contains(cell):
                    raise ValueError(f"{color.name} START {cell} is outside the {self.shape} grid")
                if cell in used:
                    raise ValueError(f"Cell {cell} is used twice in layout '{self.name}'")
                used.add(cell)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.size, self.size, self.layers)

    def contains(self, cell: Vec3) -> bool:
        return 0 <= cell.x < self.size and 0 <= cell.y < self.size and 0 <= cell.z < self.layers


class LevelView(ABC):
    """
    Read/write interface shared by the committed level and preview overlays.

    Subclasses provide raw cell storage; everything else (flow walking, win
    check, mutators) is implemented here once.
    """

    layout: LevelLayout

    @abstractmethod
    def _read(self, cell: Vec3) -> Optional[PathState]:
        """Raw state of an in-bounds cell."""

    @abstractmethod
    def _write(self, cell: Vec3, state: Optional[PathState]) -> None:
        """Raw write of an in-bounds cell."""

    @abstractmethod
    def is_obstacle(self, cell: Vec3) -> bool:
        pass

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    @property
    def size(self) -> int:
        return self.layout.size

    @property
    def layers(self) -> int:
        return self.layout.layers

    @property
    def colors(self) -> Tuple[PathColor, ...]:
        return tuple(self.layout.starts)

    def in_bounds(self, cell: Optional[Vec3]) -> bool:
        return cell is not None and self.layout.contains(cell)

    def cells(self) -> Iterator[Vec3]:
        for z in range(self.layers):
            for y in range(self.size):
                for x in range(self.size):
                    yield Vec3(x, y, z)

    def path_at(self, cell: Optional[Vec3]) -> Optional[PathState]:
        """Path state of a cell; None when out of bounds, an obstacle or empty."""
        if not self.in_bounds(cell) or self.is_obstacle(cell):
            return None
        return self._read(cell)

    def is_drawable(self, cell: Optional[Vec3]) -> bool:
        return self.in_bounds(cell) and not self.is_obstacle(cell) and self._read(cell) is None

    def starts_of(self, color: PathColor) -> Tuple[Vec3, ...]:
        return tuple(self.layout.starts.get(color, ()))

    def segments_of(self, color: PathColor) -> List[Vec3]:
        found = []
        for cell in self.cells():
            state = self.path_at(cell)
            if state is not None and state.color is color and state.role is PathRole.SEGMENT:
                found.append(cell)
        return found

    def flow_of(self, color: PathColor) -> Optional[List[Vec3]]:
        """
        Cells of a color's flow, starting at the START that carries a pointer.

        Returns None if the color has no START or none of its STARTs points
        anywhere yet. Raises FlowConsistencyError on a cycle or a pointer that
        leaves the color.
        """
        head = None
        for start in self.starts_of(color):
            state = self.path_at(start)
            if state is not None and state.direction is not None:
                head = start
                break
        if head is None:
            return None

        flow = [head]
        seen = {head}
        cell, state = head, self.path_at(head)
        while state.direction is not None:
            nxt = move(state.direction, cell)
            nxt_state = self.path_at(nxt)
            if nxt_state is None or nxt_state.color is not color:
                raise FlowConsistencyError(
                    f"{color.name} flow points from {cell} to {nxt}, which does not hold {color.name}"
                )
            if nxt in seen:
                raise FlowConsistencyError(f"{color.name} flow revisits {nxt}")
            flow.append(nxt)
            seen.add(nxt)
            cell, state = nxt, nxt_state
        return flow

    def predecessor_in_flow(self, cell: Vec3) -> Optional[Vec3]:
        """The neighbor whose outgoing direction points at ``cell``, if any."""
        for direction, neighbor in neighbors(cell):
            state = self.path_at(neighbor)
            if state is not None and state.direction is direction.reverse:
                return neighbor
        return None

    def is_connected(self, color: PathColor) -> bool:
        """True when the color's flow runs from one START to the other."""
        flow = self.flow_of(color)
        if not flow or len(flow) < 2:
            return False
        return flow[-1] in self.starts_of(color) and flow[-1] != flow[0]

    def occupied_count(self) -> int:
        return sum(1 for cell in self.cells() if self.path_at(cell) is not None)

    def drawable_count(self) -> int:
        """Number of cells a flow may occupy (everything but obstacles)."""
        return self.size * self.size * self.layers - len(self.layout.obstacles)

    def check_win(self, require_full_coverage: bool = True) -> bool:
        """
        Every color connected START to START and, unless disabled, every
        non-obstacle cell covered by some flow.
        """
        if not all(self.is_connected(color) for color in self.colors):
            return False
        if require_full_coverage:
            return self.occupied_count() == self.drawable_count()
        return True

    # ------------------------------------------------------------------ #
    # Mutators
    # ------------------------------------------------------------------ #
    def set_path(self, cell: Vec3, color: PathColor, direction: Optional[Direction] = None) -> None:
        """Write a SEGMENT of ``color`` on an empty drawable cell."""
        if not self.is_drawable(cell):
            raise FlowConsistencyError(f"Cannot draw {color.name} at {cell}: cell is not drawable")
        self._write(cell, PathState(color, PathRole.SEGMENT, direction))

    def clear_path(self, cell: Vec3) -> None:
        """Remove a SEGMENT. STARTs are never removed."""
        state = self.path_at(cell)
        if state is None:
            raise FlowConsistencyError(f"No path to clear at {cell}")
        if state.is_start:
            raise FlowConsistencyError(f"Refusing to clear {state.color.name} START at {cell}")
        self._write(cell, None)

    def set_direction(self, cell: Vec3, direction: Optional[Direction]) -> None:
        state = self.path_at(cell)
        if state is None:
            raise FlowConsistencyError(f"No path at {cell} to point {direction}")
        self._write(cell, state.with_direction(direction))

    def clear_color(self, color: PathColor) -> None:
        """Remove every SEGMENT of a color and disconnect its STARTs."""
        for cell in self.segments_of(color):
            self._write(cell, None)
        for start in self.starts_of(color):
            state = self.path_at(start)
            if state is not None and state.direction is not None:
                self._write(start, state.with_direction(None))


class Level(LevelView):
    """Committed puzzle state backed by numpy arrays indexed [x, y, z]."""

    def __init__(self, layout: LevelLayout):
        self.layout = layout
        shape = layout.shape
        self._color = np.full(shape, _NONE, dtype=np.int8)
        self._role = np.zeros(shape, dtype=np.int8)
        self._direction = np.full(shape, _NONE, dtype=np.int8)
        self._obstacle = np.zeros(shape, dtype=bool)
        for cell in layout.obstacles:
            self._obstacle[cell.to_tuple()] = True
        self.reset()

    def reset(self) -> None:
        """Drop every flow, leaving only the layout's STARTs."""
        self._color.fill(_NONE)
        self._role.fill(_ROLE_NONE)
        self._direction.fill(_NONE)
        for color, pair in self.layout.starts.items():
            for cell in pair:
                self._write(cell, PathState(color, PathRole.START))

    def overlay(self) -> "PreviewOverlay":
        return PreviewOverlay(self)

    def is_obstacle(self, cell: Vec3) -> bool:
        return bool(self._obstacle[cell.to_tuple()])

    def _read(self, cell: Vec3) -> Optional[PathState]:
        idx = cell.to_tuple()
        role = self._role[idx]
        if role == _ROLE_NONE:
            return None
        direction = self._direction[idx]
        return PathState(
            color=PALETTE[self._color[idx]],
            role=PathRole.START if role == _ROLE_START else PathRole.SEGMENT,
            direction=None if direction == _NONE else DIRECTIONS[direction],
        )

    def _write(self, cell: Vec3, state: Optional[PathState]) -> None:
        idx = cell.to_tuple()
        if state is None:
            self._color[idx] = _NONE
            self._role[idx] = _ROLE_NONE
            self._direction[idx] = _NONE
            return
        self._color[idx] = state.color.index
        self._role[idx] = _ROLE_START if state.is_start else _ROLE_SEGMENT
        self._direction[idx] = _NONE if state.direction is None else state.direction.index

    def segments_of(self, color: PathColor) -> List[Vec3]:
        mask = (self._color == color.index) & (self._role == _ROLE_SEGMENT)
        return [Vec3(int(x), int(y), int(z)) for x, y, z in np.argwhere(mask)]

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self._role))

    def __repr__(self) -> str:
        return (
            f"Level(name={self.layout.name!r}, size={self.size}, layers={self.layers}, "
            f"occupied={self.occupied_count()}/{self.drawable_count()})"
        )


class PreviewOverlay(LevelView):
    """
    Tentative writes layered over a committed Level.

    Reads fall through to the level unless the cell was written here. The
    level itself is untouched until ``apply``.
    """

    def __init__(self, base: Level):
        self.base = base
        self.layout = base.layout
        self._diff: Dict[Vec3, Optional[PathState]] = {}

    @property
    def changed_cells(self) -> List[Vec3]:
        return list(self._diff)

    def is_obstacle(self, cell: Vec3) -> bool:
        return self.base.is_obstacle(cell)

    def _read(self, cell: Vec3) -> Optional[PathState]:
        if cell in self._diff:
            return self._diff[cell]
        return self.base._read(cell)

    def _write(self, cell: Vec3, state: Optional[PathState]) -> None:
        self._diff[cell] = state

    def segments_of(self, color: PathColor) -> List[Vec3]:
        cells = [c for c in self.base.segments_of(color) if c not in self._diff]
        for cell, state in self._diff.items():
            if state is not None and state.color is color and state.role is PathRole.SEGMENT:
                cells.append(cell)
        return cells

    def apply(self) -> int:
        """Flush the diff into the base level; returns the number of cells written."""
        written = len(self._diff)
        for cell, state in self._diff.items():
            self.base._write(cell, state)
        self._diff.clear()
        return written

    def discard(self) -> None:
        self._diff.clear()
