"""Shape construction from drawing commands.

Shapes are assembled with a pair of builders that mirror the two phases of
drawing an outline:

- ShapeBuilder: opens contours and finalises the immutable Shape
- ContourBuilder: appends segments from the current pen position

Every appended segment is tested against the previous one; a sharp corner
closes the current spline and opens a new one with the next colour in the
Magenta, Yellow, Cyan, Yellow, ... sequence. Closing a contour reconciles the
colours across the joint where the contour wraps around.

Example:
    shape = (
        ShapeBuilder()
        .contour((0.0, 0.0))
        .line((4.0, 0.0))
        .line((4.0, 4.0))
        .line((0.0, 4.0))
        .end_contour()
        .build()
    )
"""

import logging
from dataclasses import replace

from msdforge.config import GeometryConfig
from msdforge.core.arc import EndpointParam
from msdforge.core.primitives import Segment
from msdforge.domain import Colour, Contour, Point, SegmentKind, SegmentRef, Shape, Spline
from msdforge.exceptions import BuilderStateError

logger = logging.getLogger(__name__)

PointLike = Point | tuple[float, float]


def next_colour(colour: Colour) -> Colour:
    """Colour of the spline following one of the given colour.

    Examples:
        >>> next_colour(Colour.MAGENTA)
        <Colour.YELLOW: 3>
        >>> next_colour(Colour.YELLOW)
        <Colour.CYAN: 6>
    """
    if colour is Colour.MAGENTA:
        return Colour.YELLOW
    return colour ^ Colour.MAGENTA


class ShapeBuilder:
    """Accumulates contours into a Shape.

    Attributes:
        config: Tolerances for corner detection and contour closing
    """

    def __init__(self, config: GeometryConfig | None = None) -> None:
        self.config = config or GeometryConfig()
        self._points: list[Point] = []
        self._segments: list[SegmentRef] = []
        self._splines: list[Spline] = []
        self._contours: list[Contour] = []
        self._open_contour: "ContourBuilder | None" = None
        self._built = False

    def contour(self, start: PointLike) -> "ContourBuilder":
        """Open a new contour with the pen at ``start``.

        Raises:
            BuilderStateError: If a contour is still open or the shape was built
        """
        self._check_usable("open a contour")
        self._open_contour = ContourBuilder(self, Point.of(start))
        return self._open_contour

    def build(self) -> Shape:
        """Finalise the shape.

        Raises:
            BuilderStateError: If a contour is still open or the shape was built
        """
        self._check_usable("build the shape")
        self._built = True
        return Shape(
            points=tuple(self._points),
            segments=tuple(self._segments),
            splines=tuple(self._splines),
            contours=tuple(self._contours),
        )

    def _check_usable(self, operation: str) -> None:
        if self._built:
            raise BuilderStateError(operation, "the shape has already been built")
        if self._open_contour is not None:
            raise BuilderStateError(operation, "a contour is still open")


class ContourBuilder:
    """Appends segments to the contour opened by ``ShapeBuilder.contour``.

    Segments start at the most recent point. Call ``end_contour`` to close
    the contour and get the shape builder back.
    """

    def __init__(self, owner: ShapeBuilder, start: Point) -> None:
        self._owner = owner
        self._config = owner.config
        self._closed = False

        owner._points.append(start)
        self._start_point_index = len(owner._points) - 1
        self._first_segment = len(owner._segments)
        self._first_spline = len(owner._splines)

        self._spline_start = self._first_segment
        self._colour = Colour.MAGENTA

    @property
    def current_point(self) -> Point:
        """The pen position, where the next segment starts."""
        return self._owner._points[-1]

    @property
    def segment_count(self) -> int:
        """Number of segments appended so far."""
        return len(self._owner._segments) - self._first_segment

    def line(self, end: PointLike) -> "ContourBuilder":
        """Append a straight line to ``end``."""
        self._check_open("add a line")
        return self._push(SegmentKind.LINE, (Point.of(end),))

    def quadratic_bezier(self, control: PointLike, end: PointLike) -> "ContourBuilder":
        """Append a quadratic Bezier curve."""
        self._check_open("add a quadratic bezier")
        return self._push(SegmentKind.QUADRATIC_BEZIER, (Point.of(control), Point.of(end)))

    def cubic_bezier(
        self, control_1: PointLike, control_2: PointLike, end: PointLike
    ) -> "ContourBuilder":
        """Append a cubic Bezier curve."""
        self._check_open("add a cubic bezier")
        return self._push(
            SegmentKind.CUBIC_BEZIER,
            (Point.of(control_1), Point.of(control_2), Point.of(end)),
        )

    def elliptical_arc(
        self,
        rx: float,
        ry: float,
        phi: float,
        large_arc: bool,
        sweep_ccw: bool,
        end: PointLike,
    ) -> "ContourBuilder":
        """Append an elliptical arc given in SVG endpoint form.

        A zero radius degrades the arc to a line. An arc ending where it
        starts is a full ellipse when ``large_arc`` is set and is dropped
        otherwise.

        Args:
            rx: X radius
            ry: Y radius
            phi: Rotation of the ellipse's x axis in radians
            large_arc: Take the arc sweeping more than 180 degrees
            sweep_ccw: Sweep in the positive angle direction
            end: End point

        Raises:
            ArcParameterError: If the arc parameters are not finite
        """
        self._check_open("add an elliptical arc")
        start = self.current_point
        end = Point.of(end)

        arc = EndpointParam(start, rx, ry, phi, large_arc, sweep_ccw, end)
        if arc.is_degenerate():
            return self._push(SegmentKind.LINE, (end,))
        if start.is_close(end, self._config.point_tolerance):
            if not large_arc:
                logger.debug("Dropping arc with coincident endpoints at %s", start)
                return self
            arc = replace(arc, end=start)
            end = start

        centre = arc.to_centre()
        return self._push(SegmentKind.ELLIPTICAL_ARC, (*centre.to_points(), end))

    def end_contour(self) -> ShapeBuilder:
        """Close the contour and return to the shape builder.

        A line back to the start point is added when the pen is elsewhere.

        Raises:
            BuilderStateError: If the contour has no segments or is already closed
        """
        self._check_open("end the contour")
        owner = self._owner
        if not self.segment_count:
            raise BuilderStateError("end the contour", "the contour has no segments")

        first_point = owner._points[self._start_point_index]
        auto_closed = not self.current_point.is_close(first_point, self._config.point_tolerance)
        if auto_closed:
            self.line(first_point)

        self._close_spline(len(owner._segments))
        self._apply_closing_colours()

        owner._contours.append(Contour(range(self._first_spline, len(owner._splines))))
        owner._open_contour = None
        self._closed = True

        logger.debug(
            "Contour closed: index=%d, segments=%d, splines=%d, auto_closed=%s",
            len(owner._contours) - 1,
            len(owner._segments) - self._first_segment,
            len(owner._splines) - self._first_spline,
            auto_closed,
        )
        return owner

    def discard(self) -> ShapeBuilder:
        """Abandon a contour that never received a segment.

        Raises:
            BuilderStateError: If the contour has segments or is already closed
        """
        self._check_open("discard the contour")
        if self.segment_count:
            raise BuilderStateError("discard the contour", "the contour has segments")
        owner = self._owner
        del owner._points[self._start_point_index :]
        owner._open_contour = None
        self._closed = True
        return owner

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise BuilderStateError(operation, "the contour has already been ended")

    def _push(self, kind: SegmentKind, points: tuple[Point, ...]) -> "ContourBuilder":
        owner = self._owner
        if kind is not SegmentKind.ELLIPTICAL_ARC and all(
            p.is_close(self.current_point, self._config.point_tolerance) for p in points
        ):
            logger.debug("Dropping zero-length %s at %s", kind.name.lower(), self.current_point)
            return self

        # Curves start at the current pen position; arcs carry their own
        # centre parameterisation instead
        owner._points.extend(points)
        owner._segments.append(SegmentRef(kind, len(owner._points) - kind.arity))

        count = len(owner._segments)
        if count > self._spline_start + 1 and self._is_sharp_corner(count - 2, count - 1):
            self._close_spline(count - 1)
            self._spline_start = count - 1
            self._colour = next_colour(self._colour)
        return self

    def _close_spline(self, end: int) -> None:
        self._owner._splines.append(Spline(range(self._spline_start, end), self._colour))

    def _segment(self, index: int) -> Segment:
        owner = self._owner
        ref = owner._segments[index]
        return Segment(ref.kind, tuple(owner._points[i] for i in ref.points_range))

    def _is_sharp_corner(self, before: int, after: int) -> bool:
        """Check the joint where segment ``before`` ends and ``after`` starts."""
        incoming = self._segment(before).end_direction()
        outgoing = self._segment(after).start_direction()
        return (incoming - outgoing).length() > self._config.corner_tolerance

    def _apply_closing_colours(self) -> None:
        """Reconcile spline colours across the joint where the contour wraps.

        With fewer than two corners no colour pairing can represent the
        contour, so every spline becomes white and the contour behaves as a
        plain distance field. When the wrap joint is smooth, the last spline
        continues the first one and takes its colour.
        """
        splines = self._owner._splines
        first, last = self._first_spline, len(splines)

        wrap_sharp = self._is_sharp_corner(len(self._owner._segments) - 1, self._first_segment)
        corners = (last - first - 1) + int(wrap_sharp)

        if corners <= 1:
            for i in range(first, last):
                splines[i] = replace(splines[i], colour=Colour.WHITE)
        elif not wrap_sharp:
            splines[last - 1] = replace(splines[last - 1], colour=splines[first].colour)
