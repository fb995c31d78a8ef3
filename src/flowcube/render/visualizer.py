"""
matplotlib view of a level - one square panel per layer.
"""

import io
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgba
from matplotlib.patches import Circle, Rectangle
from PIL import Image

from flowcube.core.config import RenderConfig
from flowcube.core.geometry import Direction, Vec3, move
from flowcube.core.level import LevelView

BACKGROUND = '#00005f'
GRID_COLOR = '#bfbfbf'
OBSTACLE_COLOR = '#202020'


def _darker(rgb, factor: float = 0.7):
    return tuple(channel / 255.0 * factor for channel in rgb)


def draw_layer(ax, view: LevelView, layer: int,
               committed: Optional[LevelView] = None,
               config: Optional[RenderConfig] = None):
    """
    Draw a single layer onto an axes.

    Args:
        ax: matplotlib axes
        view: state to draw (committed level or a preview overlay)
        layer: z index
        committed: committed state shown as a faint haze under ``view``
        config: render options
    """
    config = config or RenderConfig()
    size = view.size

    ax.add_patch(Rectangle((0, 0), size, size, facecolor=BACKGROUND, edgecolor='none'))

    for y in range(size):
        for x in range(size):
            cell = Vec3(x, y, layer)
            if view.is_obstacle(cell):
                ax.add_patch(Rectangle((x, y), 1, 1, facecolor=OBSTACLE_COLOR, edgecolor='none'))
                continue

            if committed is not None and config.show_committed_haze:
                old = committed.path_at(cell)
                if old is not None:
                    ax.add_patch(Rectangle(
                        (x, y), 1, 1,
                        facecolor=to_rgba(old.color.hex, config.haze_alpha),
                        edgecolor='none',
                    ))

            state = view.path_at(cell)
            if state is None:
                continue

            cx, cy = x + 0.5, y + 0.5
            radius = 0.33 if state.is_start else 0.25
            ax.add_patch(Circle((cx, cy), radius, color=state.color.hex, zorder=3))

            if state.direction is None:
                continue
            if state.direction.planar:
                nxt = move(state.direction, cell)
                ax.plot([cx, nxt.x + 0.5], [cy, nxt.y + 0.5],
                        color=state.color.hex, linewidth=6, solid_capstyle='butt', zorder=2)
            else:
                marker = '^' if state.direction is Direction.IN else 'v'
                ax.plot(cx, cy, marker=marker, markersize=8,
                        color=_darker(state.color.rgb), zorder=4)

    if config.show_grid:
        for i in range(size + 1):
            ax.plot([0, size], [i, i], color=GRID_COLOR, linewidth=0.8)
            ax.plot([i, i], [0, size], color=GRID_COLOR, linewidth=0.8)

    ax.set_xlim(0, size)
    ax.set_ylim(size, 0)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(f"z={layer}")


def draw_level(view: LevelView,
               layers: Optional[Sequence[int]] = None,
               committed: Optional[LevelView] = None,
               title: str = "",
               config: Optional[RenderConfig] = None) -> plt.Figure:
    """
    Draw the given layers side by side.

    Returns:
        matplotlib Figure object
    """
    config = config or RenderConfig()
    layers = list(range(view.layers)) if layers is None else list(layers)
    width, height = config.figure_size

    fig, axes = plt.subplots(1, len(layers), figsize=(width * len(layers), height), squeeze=False)
    for ax, layer in zip(axes[0], layers):
        draw_layer(ax, view, layer, committed=committed, config=config)

    status = f"{view.occupied_count()}/{view.drawable_count()} cells"
    fig.suptitle(f"{title}\n{status}" if title else status)
    fig.tight_layout()
    return fig


def figure_to_image(fig: plt.Figure, dpi: int = 100) -> Image.Image:
    """Rasterize a figure into a PIL image and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi)
    buf.seek(0)
    img = Image.open(buf).convert("RGB")
    plt.close(fig)
    return img


def render_image(view: LevelView, committed: Optional[LevelView] = None,
                 title: str = "", config: Optional[RenderConfig] = None) -> Image.Image:
    config = config or RenderConfig()
    fig = draw_level(view, committed=committed, title=title, config=config)
    return figure_to_image(fig, dpi=config.dpi)
