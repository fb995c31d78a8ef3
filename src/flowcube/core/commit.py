"""
Drag-path commit: turn a gesture into a committed flow.
"""

from typing import List, Optional, Sequence, Tuple

from flowcube.core.geometry import Vec3, direction_between
from flowcube.core.level import LevelView
from flowcube.core.paths import (
    CommitResult, ErrorCode, InvalidGestureError, PathColor
)


def sanitize_gesture(view: LevelView, gesture: Sequence[Vec3]) -> Tuple[List[Vec3], List[Vec3]]:
    """
    Keep only the gesture cells that continue a unit-step path.

    A cell is dropped when it is out of bounds, an obstacle, already kept, or
    not exactly one step away from the previously kept cell. The input
    sequence is not modified.

    Returns:
        (kept cells, dropped cells)
    """
    kept = [gesture[0]]
    seen = {gesture[0]}
    dropped = []
    for cell in gesture[1:]:
        if (not view.in_bounds(cell) or view.is_obstacle(cell) or cell in seen
                or direction_between(kept[-1], cell) is None):
            dropped.append(cell)
            continue
        kept.append(cell)
        seen.add(cell)
    return kept, dropped


def sever_flow(view: LevelView, cell: Vec3) -> Optional[PathColor]:
    """
    Cut the flow running through ``cell`` at that cell.

    Every cell of the flow from ``cell`` onward is erased, STARTs excepted
    (they only lose their outgoing direction), and the cell before the cut
    becomes the new dangling end.

    Returns:
        The severed color, or None if nothing changed.
    """
    state = view.path_at(cell)
    if state is None:
        return None

    color = state.color
    changed = False
    predecessor = view.predecessor_in_flow(cell)

    flow = view.flow_of(color)
    if flow is not None and cell in flow:
        for tail in flow[flow.index(cell):]:
            if view.path_at(tail).is_start:
                view.set_direction(tail, None)
            else:
                view.clear_path(tail)
            changed = True

    if predecessor is not None:
        view.set_direction(predecessor, None)
        changed = True

    return color if changed else None


def commit_gesture(view: LevelView, gesture: Sequence[Vec3]) -> CommitResult:
    """
    Reconcile a drag gesture into the level.

    Args:
        view: level (or preview overlay) to mutate
        gesture: ordered cells, the first one holding a START

    Returns:
        CommitResult describing the committed flow

    Raises:
        InvalidGestureError: empty gesture or first cell is not a START;
            nothing is mutated in that case
    """
    if not gesture:
        raise InvalidGestureError("Cannot commit an empty gesture")
    first = gesture[0]
    first_state = view.path_at(first)
    if first_state is None or not first_state.is_start:
        raise InvalidGestureError(f"Gesture must begin on a START cell, not {first}")

    color = first_state.color

    # A single press on a START erases that color
    if len(gesture) == 1:
        view.clear_color(color)
        return CommitResult(
            color=color,
            flow=[first],
            erased=True,
            message=f"{color.name} flow erased",
        )

    # 1. Drop cells that do not continue the path
    cells, dropped = sanitize_gesture(view, gesture)

    # 2. Redraw this color from scratch
    view.clear_color(color)

    result = CommitResult(color=color, dropped=dropped)

    # 3. Walk the gesture, cutting through other flows
    for index in range(1, len(cells)):
        head, target = cells[index - 1], cells[index]
        state = view.path_at(target)

        if state is not None and state.color is not color:
            severed = sever_flow(view, target)
            if severed is not None and severed not in result.severed:
                result.severed.append(severed)
            state = view.path_at(target)

        if state is not None and state.is_start:
            if state.color is color:
                view.set_direction(head, direction_between(head, target))
                view.set_direction(target, None)
                result.connected = True
            else:
                result.error = ErrorCode.DEAD_END
            # 4. Anything past an endpoint is discarded
            result.dropped.extend(cells[index + 1:])
            break

        if not view.is_drawable(target):
            result.error = ErrorCode.DEAD_END
            result.dropped.extend(cells[index:])
            break

        view.set_path(target, color)
        view.set_direction(head, direction_between(head, target))

    result.flow = view.flow_of(color) or [first]
    if result.connected:
        result.message = f"{color.name} connected ({len(result.flow)} cells)"
    else:
        if result.error is ErrorCode.OK:
            result.error = ErrorCode.NOT_CONNECTED
        result.message = f"{color.name} ends at {result.flow[-1]} ({len(result.flow)} cells)"
    if result.severed:
        result.message += "; cut " + ", ".join(c.name for c in result.severed)
    return result
