"""msdforge - Multi-channel signed distance fields from vector outlines.

msdforge turns contours of lines, Bezier curves and elliptical arcs into a
multi-channel signed distance field (MSDF). Each of the three colour channels
holds the signed distance to a different subset of the outline's edges, so a
renderer can rebuild sharp corners by taking the median of the channels.

Example:
    $ msdforge glyph Roboto-Regular.ttf A -o A.png

This will render a 32x32 MSDF of the glyph "A" to A.png.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
