"""
flowcube: connect-the-dots flows on a layered cube

Each color has two START cells; the player drags a path from one to the
other across the cells of a cubic grid, moving between layers as well as
within them. Drawing over another color cuts that color's flow. A puzzle is
solved when every color is connected and every open cell is filled.

Example Usage:
```python
from flowcube import Level, PuzzleSession, Vec3, load_layout

session = PuzzleSession(Level(load_layout("easy")))
session.on_pressed(Vec3(0, 0, 0))
session.on_dragged(Vec3(1, 0, 0))
session.on_released()
```

Command-line Usage:
```bash
flowcube play --layout medium
flowcube render --layout hard --output hard.png
```
"""

from flowcube.core.geometry import Direction, Vec3
from flowcube.core.paths import InvalidGestureError, FlowConsistencyError, PathColor
from flowcube.core.level import Level, LevelLayout
from flowcube.core.commit import commit_gesture
from flowcube.core.config import Config, load_config
from flowcube.core.session import PuzzleSession
from flowcube.layouts import load_layout

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "Vec3",
    "InvalidGestureError",
    "FlowConsistencyError",
    "PathColor",
    "Level",
    "LevelLayout",
    "commit_gesture",
    "Config",
    "load_config",
    "PuzzleSession",
    "load_layout",
]
