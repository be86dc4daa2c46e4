"""Conversion of fontTools pen recordings into shapes.

A RecordingPen records an outline as drawing commands:
- ('moveTo', ((x, y),))
- ('lineTo', ((x, y),))
- ('qCurveTo', ((x1, y1), ..., (xn, yn)))  # TrueType, implied on-curve points
- ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic, possibly a super-bezier
- ('closePath', ()) / ('endPath', ())

Quadratic runs with several off-curve points and super-beziers are split
into plain segments with fontTools' own decomposition helpers.
"""

from collections.abc import Iterable
from typing import Any

from fontTools.misc.transform import Transform
from fontTools.pens.basePen import decomposeQuadraticSegment, decomposeSuperBezierSegment

from msdforge.core.builder import ContourBuilder, ShapeBuilder
from msdforge.domain import Point

Recording = Iterable[tuple[str, tuple[Any, ...]]]


def _midpoint(a: tuple[float, float], b: tuple[float, float]) -> tuple[float, float]:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def _finish(contour: ContourBuilder) -> None:
    # Contours whose points all coincide have nothing to draw
    if contour.segment_count:
        contour.end_contour()
    else:
        contour.discard()


def draw_recording(
    recording: Recording,
    builder: ShapeBuilder | None = None,
    transform: Transform | None = None,
) -> ShapeBuilder:
    """Replay a RecordingPen value into a shape builder.

    Contours consisting of a single point, or of segments that never leave
    it, draw nothing and are skipped.
    Open contours (``endPath``) are closed by the builder.

    Args:
        recording: Drawing commands, e.g. ``RecordingPen().value``
        builder: Builder to draw into (a new one if None)
        transform: Optional affine transform applied to every point

    Returns:
        The builder, with no contour left open

    Raises:
        ValueError: If a segment is drawn without a current point, or a
            command is not supported
    """
    builder = builder or ShapeBuilder()
    contour: ContourBuilder | None = None
    start: tuple[float, float] | None = None

    def to_point(pt: tuple[float, float]) -> Point:
        if transform is not None:
            pt = transform.transformPoint(pt)
        return Point(float(pt[0]), float(pt[1]))

    def open_contour() -> ContourBuilder:
        if start is None:
            raise ValueError("Segment drawn without a current point")
        return builder.contour(to_point(start))

    for command, args in recording:
        if command == "moveTo":
            if contour is not None:
                _finish(contour)
                contour = None
            start = args[0]

        elif command in ("closePath", "endPath"):
            if contour is not None:
                _finish(contour)
            contour = None
            start = None

        elif command == "lineTo":
            contour = contour or open_contour()
            contour.line(to_point(args[0]))

        elif command == "qCurveTo":
            points = list(args)
            if points[-1] is None:
                # Contour made only of off-curve points; it starts at the
                # implied on-curve point between the last and first ones.
                points.pop()
                if contour is not None:
                    _finish(contour)
                start = _midpoint(points[-1], points[0])
                contour = open_contour()
                points.append(start)
            else:
                contour = contour or open_contour()

            if len(points) == 1:
                contour.line(to_point(points[0]))
            else:
                for control, end in decomposeQuadraticSegment(points):
                    contour.quadratic_bezier(to_point(control), to_point(end))

        elif command == "curveTo":
            contour = contour or open_contour()
            points = list(args)
            if len(points) == 1:
                contour.line(to_point(points[0]))
            elif len(points) == 2:
                contour.quadratic_bezier(to_point(points[0]), to_point(points[1]))
            else:
                for c1, c2, end in decomposeSuperBezierSegment(points):
                    contour.cubic_bezier(to_point(c1), to_point(c2), to_point(end))

        else:
            raise ValueError(f"Unsupported pen command: {command}")

    if contour is not None:
        _finish(contour)

    return builder
