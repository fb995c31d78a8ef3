"""
The live drag gesture.
"""

from typing import Iterable, Iterator, List, Optional

from flowcube.core.geometry import Vec3


class Gesture:
    """Ordered, duplicate-free cells under the player's pointer."""

    def __init__(self, cells: Optional[Iterable[Vec3]] = None):
        self._cells: List[Vec3] = []
        for cell in cells or ():
            self.extend(cell)

    @property
    def cells(self) -> List[Vec3]:
        return list(self._cells)

    @property
    def first(self) -> Vec3:
        return self._cells[0]

    @property
    def last(self) -> Vec3:
        return self._cells[-1]

    def extend(self, cell: Vec3) -> bool:
        """
        Move the pointer onto ``cell``.

        Revisiting a cell already in the gesture rubber-bands it back: that
        cell and everything after it are dropped before ``cell`` is appended,
        so the gesture can never loop.

        Returns:
            False if ``cell`` is already the last cell (nothing changed)
        """
        if self._cells and self._cells[-1] == cell:
            return False
        if cell in self._cells:
            del self._cells[self._cells.index(cell):]
        self._cells.append(cell)
        return True

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Vec3]:
        return iter(self._cells)

    def __contains__(self, cell: Vec3) -> bool:
        return cell in self._cells

    def __repr__(self) -> str:
        return "Gesture([" + ", ".join(str(c) for c in self._cells) + "])"
