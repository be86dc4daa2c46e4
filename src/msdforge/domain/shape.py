"""Arena representation of a shape.

A shape owns four flat buffers: points, segments, splines and contours.
Segments, splines and contours never hold each other; they delimit index
ranges into the buffer below them:

- SegmentRef: a kind plus the index of its first point
- Spline: a half-open range of segments sharing one colour
- Contour: a half-open range of splines forming a closed path
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from msdforge.domain.colour import Colour
from msdforge.domain.vector import Point


class SegmentKind(Enum):
    """Primitive type of a segment.

    The value is the number of points the segment occupies in the point
    buffer. An elliptical arc stores its centre parameterisation in the
    first four points followed by its end point:

    - (centre_x, centre_y)
    - (x_radius, aspect_ratio)
    - (axis_angle, 0)
    - (start_angle, sweep_angle)
    - end point
    """

    LINE = 2
    QUADRATIC_BEZIER = 3
    CUBIC_BEZIER = 4
    ELLIPTICAL_ARC = 5

    @property
    def arity(self) -> int:
        """Number of points the segment occupies."""
        return self.value


@dataclass(frozen=True, slots=True)
class SegmentRef:
    """Reference to a segment in the point buffer.

    Attributes:
        kind: Primitive type, which implies the number of points
        points_index: Index of the segment's first point
    """

    kind: SegmentKind
    points_index: int

    @property
    def points_range(self) -> range:
        return range(self.points_index, self.points_index + self.kind.arity)


@dataclass(frozen=True, slots=True)
class Spline:
    """A maximal run of segments between two sharp corners.

    Attributes:
        segments_range: Half-open range into the segment buffer
        colour: Channels the spline contributes to
    """

    segments_range: range
    colour: Colour


@dataclass(frozen=True, slots=True)
class Contour:
    """A closed path describing a region of space.

    Sharp corners are located at the boundary points of adjacent splines.

    Attributes:
        spline_range: Half-open range into the spline buffer
    """

    spline_range: range


@dataclass(frozen=True, slots=True)
class Shape:
    """A shape ready to be decomposed into a raster distance field.

    Built once by ``ShapeBuilder`` and read-only afterwards, so it can be
    sampled from several workers at once.

    Attributes:
        points: Buffer containing the points
        segments: Buffer containing references to the segments
        splines: Buffer containing the splines
        contours: Buffer containing the contours
    """

    points: tuple[Point, ...] = ()
    segments: tuple[SegmentRef, ...] = ()
    splines: tuple[Spline, ...] = ()
    contours: tuple[Contour, ...] = ()

    def segment_points(self, ref: SegmentRef) -> tuple[Point, ...]:
        """Get the points belonging to a segment."""
        return self.points[ref.points_index : ref.points_index + ref.kind.arity]

    def splines_of(self, contour: Contour) -> Iterator[Spline]:
        """Iterate over the splines of a contour."""
        for i in contour.spline_range:
            yield self.splines[i]

    def segment_refs_of(self, spline: Spline) -> Iterator[SegmentRef]:
        """Iterate over the segment references of a spline."""
        for i in spline.segments_range:
            yield self.segments[i]

    def is_empty(self) -> bool:
        return not self.contours

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box of the shape's control geometry.

        Bezier control points are included, so the box may be larger than
        the outline itself. Elliptical arcs contribute their full ellipse's
        extent.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        xs: list[float] = []
        ys: list[float] = []
        for ref in self.segments:
            ps = self.segment_points(ref)
            if ref.kind is SegmentKind.ELLIPTICAL_ARC:
                centre, radii = ps[0], ps[1]
                extent = max(abs(radii.x), abs(radii.x * radii.y))
                xs.extend((centre.x - extent, centre.x + extent))
                ys.extend((centre.y - extent, centre.y + extent))
                xs.append(ps[4].x)
                ys.append(ps[4].y)
            else:
                xs.extend(p.x for p in ps)
                ys.extend(p.y for p in ps)

        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))

    def sample(self, point: Point) -> tuple[float, float, float]:
        """Sample the multi-channel signed pseudo-distance at ``point``.

        See ``msdforge.core.distance.sample``.
        """
        from msdforge.core.distance import sample

        return sample(self, point)
