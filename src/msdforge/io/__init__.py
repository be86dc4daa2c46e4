"""I/O layer for msdforge.

This module moves shapes and distance fields in and out of the process:

- Load glyph outlines from TTF/OTF fonts with fonttools
- Replay fontTools pen recordings into the shape builder
- Encode distance fields as PNG images with Pillow
- Emit SVG documents showing the spline colouring

Key classes:
- FontReader: Load fonts and extract glyph shapes
- MsdfImage: Encoded distance field raster
"""

from msdforge.io.image import (
    MAX_COLOUR,
    MAX_DISTANCE,
    MsdfImage,
    color_distance,
    distance_color,
    median,
    render_preview,
)
from msdforge.io.pen import draw_recording
from msdforge.io.reader import FontReader
from msdforge.io.svg import shape_to_svg

__all__ = [
    "MAX_COLOUR",
    "MAX_DISTANCE",
    "FontReader",
    "MsdfImage",
    "color_distance",
    "distance_color",
    "draw_recording",
    "median",
    "render_preview",
    "shape_to_svg",
]
