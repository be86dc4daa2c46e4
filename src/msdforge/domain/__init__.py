"""Domain models for msdforge.

This module contains the data types describing a shape. All models are
designed to be:

- Immutable (frozen dataclasses, tuples and ranges)
- Picklable for worker processes
- Free of geometry algorithms, which live in ``msdforge.core``

Key classes:
- Point, Vector: 2D geometry foundations
- Colour: Channel set tagging each spline
- SegmentKind, SegmentRef, Spline, Contour, Shape: the shape arena
"""

from msdforge.domain.colour import CHANNELS, Colour
from msdforge.domain.shape import Contour, SegmentKind, SegmentRef, Shape, Spline
from msdforge.domain.vector import Point, Vector

__all__: list[str] = [
    "CHANNELS",
    # Enums
    "Colour",
    "SegmentKind",
    # Geometry
    "Point",
    "Vector",
    # Arena
    "Contour",
    "SegmentRef",
    "Shape",
    "Spline",
]
