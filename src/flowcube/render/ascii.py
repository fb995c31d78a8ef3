"""
Text view of a level, one block per layer.

Each cell is three characters: the color symbol (upper case for a START,
lower case for a segment) followed by its outgoing pointer. Empty cells are
``.`` and obstacles ``#``.
"""

from typing import List, Optional

from flowcube.core.geometry import Direction, Vec3
from flowcube.core.level import LevelView

ARROWS = {
    Direction.UP: "^",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
    Direction.RIGHT: ">",
    Direction.IN: "i",
    Direction.OUT: "o",
}


def cell_glyph(view: LevelView, cell: Vec3) -> str:
    if view.is_obstacle(cell):
        return "#  "
    state = view.path_at(cell)
    if state is None:
        return ".  "
    symbol = state.color.symbol if state.is_start else state.color.symbol.lower()
    arrow = ARROWS[state.direction] if state.direction is not None else " "
    return f"{symbol}{arrow} "


def ascii_layer(view: LevelView, layer: int) -> List[str]:
    rows = []
    for y in range(view.size):
        rows.append("".join(cell_glyph(view, Vec3(x, y, layer)) for x in range(view.size)).rstrip())
    return rows


def ascii_level(view: LevelView, layer: Optional[int] = None) -> str:
    """Render one layer, or all of them top to bottom."""
    if layer is not None and not 0 <= layer < view.layers:
        raise ValueError(f"Layer {layer} is outside 0..{view.layers - 1}")
    layers = range(view.layers) if layer is None else [layer]
    lines = []
    for z in layers:
        lines.append(f"Layer z={z}:")
        lines.extend("  " + row for row in ascii_layer(view, z))
    return "\n".join(lines)
