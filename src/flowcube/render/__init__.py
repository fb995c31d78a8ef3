"""Renderers that read a level through its query interface."""

from flowcube.render.ascii import ascii_layer, ascii_level
from flowcube.render.visualizer import draw_layer, draw_level, figure_to_image, render_image

__all__ = [
    "ascii_layer",
    "ascii_level",
    "draw_layer",
    "draw_level",
    "figure_to_image",
    "render_image",
]
