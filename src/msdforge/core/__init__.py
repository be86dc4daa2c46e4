"""Core geometry algorithms for msdforge.

This module contains the algorithms that turn drawing commands into
distance fields:

- Root finding for the curve normal equations
- Curve primitives (lines, Beziers, elliptical arcs)
- Shape building with corner detection and channel colouring
- Signed distance and pseudo-distance sampling
- Rendering shapes into MSDF images
"""

from msdforge.core.arc import CentreParam, EllipticalArc, EndpointParam
from msdforge.core.builder import ContourBuilder, ShapeBuilder
from msdforge.core.distance import (
    closer,
    orthogonality,
    sample,
    sample_single_channel,
    spline_distance_orthogonality,
    spline_pseudo_distance,
)
from msdforge.core.generator import PixelTransform, frame_shape, generate_msdf
from msdforge.core.primitives import (
    CubicBezier,
    Line,
    Primitive,
    QuadraticBezier,
    Segment,
    primitive_for,
    segment_at,
)
from msdforge.core.roots import aberth, halleys_method, roots_in_range

__all__ = [
    # Root finding
    "aberth",
    "halleys_method",
    "roots_in_range",
    # Primitives
    "CentreParam",
    "CubicBezier",
    "EllipticalArc",
    "EndpointParam",
    "Line",
    "Primitive",
    "QuadraticBezier",
    "Segment",
    "primitive_for",
    "segment_at",
    # Building
    "ContourBuilder",
    "ShapeBuilder",
    # Sampling
    "closer",
    "orthogonality",
    "sample",
    "sample_single_channel",
    "spline_distance_orthogonality",
    "spline_pseudo_distance",
    # Rendering
    "PixelTransform",
    "frame_shape",
    "generate_msdf",
]
