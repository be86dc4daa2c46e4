"""Curve primitives and distance queries.

Each primitive evaluates a segment given as a tuple of points:
- Line: start, end
- QuadraticBezier: start, control, end
- CubicBezier: start, control 1, control 2, end
- EllipticalArc: centre parameterisation followed by the end point
  (see ``msdforge.core.arc``)

Curves are defined by their analytic form over all real ``t``, so sampling
outside ``[0, 1]`` extrapolates. Parameter ranges are passed as ``start`` and
``end`` floats, using infinities for open ends.

All functions are pure and stateless.
"""

import math
from dataclasses import dataclass

from msdforge.core.roots import roots_in_range
from msdforge.domain import Point, SegmentKind, SegmentRef, Shape, Vector


def in_range(t: float, start: float, end: float) -> bool:
    return start <= t <= end


class Primitive:
    """Common operations of a curve primitive.

    Subclasses provide ``sample``, ``sample_derivative`` and
    ``find_normals``; the distance queries are shared.
    """

    @classmethod
    def sample(cls, ps: tuple[Point, ...], t: float) -> Point:
        """Evaluate the curve at time ``t``."""
        raise NotImplementedError

    @classmethod
    def sample_derivative(cls, ps: tuple[Point, ...], t: float) -> Vector:
        """Tangent to the curve at time ``t`` (not normalised)."""
        raise NotImplementedError

    @classmethod
    def find_normals(
        cls, ps: tuple[Point, ...], point: Point, start: float, end: float
    ) -> list[float]:
        """Times within ``[start, end]`` at which a normal passes through ``point``."""
        raise NotImplementedError

    @classmethod
    def start_point(cls, ps: tuple[Point, ...]) -> Point:
        return ps[0]

    @classmethod
    def start_direction(cls, ps: tuple[Point, ...]) -> Vector:
        """Unit tangent at the start of the curve.

        When the derivative vanishes (a control point on top of the start
        point), the direction towards the next distinct control point is
        used instead.
        """
        d = cls.sample_derivative(ps, 0.0)
        if d.is_zero():
            for p in ps[1:]:
                if p != ps[0]:
                    return (p - ps[0]).normalized()
        return d.normalized()

    @classmethod
    def end_direction(cls, ps: tuple[Point, ...]) -> Vector:
        """Unit tangent at the end of the curve."""
        d = cls.sample_derivative(ps, 1.0)
        if d.is_zero():
            for p in reversed(ps[:-1]):
                if p != ps[-1]:
                    return (ps[-1] - p).normalized()
        return d.normalized()

    @classmethod
    def pseudo_distance(
        cls,
        ps: tuple[Point, ...],
        point: Point,
        start: float = -math.inf,
        end: float = math.inf,
    ) -> tuple[float, float]:
        """Distance from ``point`` to the curve restricted to ``[start, end]``.

        Candidates are the feet of the normals through ``point`` inside the
        range and the finite bounds of the range.

        Returns:
            Tuple of (distance, t) for the nearest candidate
        """
        selected_dist = math.inf
        selected_t = 0.0

        for t in cls.find_normals(ps, point, start, end):
            dist = (point - cls.sample(ps, t)).length()
            if dist < selected_dist:
                selected_dist = dist
                selected_t = t

        for t in (start, end):
            if math.isfinite(t):
                dist = (point - cls.sample(ps, t)).length()
                if dist < selected_dist:
                    selected_dist = dist
                    selected_t = t

        return selected_dist, selected_t

    @classmethod
    def distance(cls, ps: tuple[Point, ...], point: Point) -> tuple[float, float]:
        """Distance from ``point`` to the curve for ``t`` in ``[0, 1]``."""
        return cls.pseudo_distance(ps, point, 0.0, 1.0)


class Line(Primitive):
    """Straight line from ``ps[0]`` to ``ps[1]``."""

    @classmethod
    def sample(cls, ps: tuple[Point, ...], t: float) -> Point:
        return ps[0] + (ps[1] - ps[0]) * t

    @classmethod
    def sample_derivative(cls, ps: tuple[Point, ...], t: float) -> Vector:
        return ps[1] - ps[0]

    @classmethod
    def find_normals(
        cls, ps: tuple[Point, ...], point: Point, start: float, end: float
    ) -> list[float]:
        v0 = point - ps[0]
        v1 = ps[1] - ps[0]
        length_sq = v1.dot(v1)
        if length_sq == 0.0:
            # Every t lands on the same point
            return [min(max(0.0, start), end)]
        t = v0.dot(v1) / length_sq
        return [t] if in_range(t, start, end) else []


class QuadraticBezier(Primitive):
    """Degree 2 Bezier curve: start, control, end."""

    @classmethod
    def sample(cls, ps: tuple[Point, ...], t: float) -> Point:
        v1 = ps[1] - ps[0]
        v2 = ps[2].as_vector() - 2.0 * ps[1].as_vector() + ps[0].as_vector()
        return ps[0] + v1 * (2.0 * t) + v2 * (t * t)

    @classmethod
    def sample_derivative(cls, ps: tuple[Point, ...], t: float) -> Vector:
        v1 = ps[1] - ps[0]
        v2 = ps[2].as_vector() - 2.0 * ps[1].as_vector() + ps[0].as_vector()
        return v1 * 2.0 + v2 * (2.0 * t)

    @classmethod
    def find_normals(
        cls, ps: tuple[Point, ...], point: Point, start: float, end: float
    ) -> list[float]:
        v2 = ps[2].as_vector() - 2.0 * ps[1].as_vector() + ps[0].as_vector()
        if v2.is_zero():
            # The control point sits midway between the ends, which makes
            # the curve a line traversed at constant speed.
            return Line.find_normals((ps[0], ps[2]), point, start, end)

        v0 = point - ps[0]
        v1 = ps[1] - ps[0]
        # (B(t) - P) . B'(t) / 2
        polynomial = [
            -v1.dot(v0),
            2.0 * v1.dot(v1) - v2.dot(v0),
            3.0 * v1.dot(v2),
            v2.dot(v2),
        ]
        return roots_in_range(polynomial, start, end)


class CubicBezier(Primitive):
    """Degree 3 Bezier curve: start, control 1, control 2, end."""

    @staticmethod
    def _differences(ps: tuple[Point, ...]) -> tuple[Vector, Vector, Vector]:
        p0, p1, p2, p3 = (p.as_vector() for p in ps)
        v1 = p1 - p0
        v2 = p2 - 2.0 * p1 + p0
        v3 = p3 - 3.0 * p2 + 3.0 * p1 - p0
        return v1, v2, v3

    @classmethod
    def sample(cls, ps: tuple[Point, ...], t: float) -> Point:
        v1, v2, v3 = cls._differences(ps)
        return ps[0] + v1 * (3.0 * t) + v2 * (3.0 * t * t) + v3 * (t * t * t)

    @classmethod
    def sample_derivative(cls, ps: tuple[Point, ...], t: float) -> Vector:
        v1, v2, v3 = cls._differences(ps)
        return v1 * 3.0 + v2 * (6.0 * t) + v3 * (3.0 * t * t)

    @classmethod
    def find_normals(
        cls, ps: tuple[Point, ...], point: Point, start: float, end: float
    ) -> list[float]:
        v0 = point - ps[0]
        v1, v2, v3 = cls._differences(ps)
        # (B(t) - P) . B'(t) / 3; vanishing leading terms are trimmed by
        # the root finder, so lower-degree curves need no special case.
        polynomial = [
            -v1.dot(v0),
            3.0 * v1.dot(v1) - 2.0 * v2.dot(v0),
            9.0 * v1.dot(v2) - v3.dot(v0),
            4.0 * v1.dot(v3) + 6.0 * v2.dot(v2),
            5.0 * v2.dot(v3),
            v3.dot(v3),
        ]
        if not any(polynomial[1:]):
            return Line.find_normals((ps[0], ps[3]), point, start, end)
        return roots_in_range(polynomial, start, end)


def primitive_for(kind: SegmentKind) -> type[Primitive]:
    """Get the primitive implementing a segment kind.

    Raises:
        ValueError: If the kind is unknown
    """
    from msdforge.core.arc import EllipticalArc

    if kind is SegmentKind.LINE:
        return Line
    elif kind is SegmentKind.QUADRATIC_BEZIER:
        return QuadraticBezier
    elif kind is SegmentKind.CUBIC_BEZIER:
        return CubicBezier
    elif kind is SegmentKind.ELLIPTICAL_ARC:
        return EllipticalArc
    else:
        raise ValueError(f"Unknown segment kind: {kind}")


@dataclass(frozen=True, slots=True)
class Segment:
    """A segment resolved against its shape's point buffer.

    Attributes:
        kind: Primitive type
        points: The segment's points
    """

    kind: SegmentKind
    points: tuple[Point, ...]

    @property
    def primitive(self) -> type[Primitive]:
        return primitive_for(self.kind)

    @property
    def start(self) -> Point:
        return self.primitive.start_point(self.points)

    @property
    def end(self) -> Point:
        return self.points[-1]

    def sample(self, t: float) -> Point:
        return self.primitive.sample(self.points, t)

    def sample_derivative(self, t: float) -> Vector:
        return self.primitive.sample_derivative(self.points, t)

    def start_direction(self) -> Vector:
        return self.primitive.start_direction(self.points)

    def end_direction(self) -> Vector:
        return self.primitive.end_direction(self.points)

    def tangent(self, t: float) -> Vector:
        """Direction of travel at ``t``, falling back to the endpoint
        directions where the derivative vanishes."""
        d = self.sample_derivative(t)
        if not d.is_zero():
            return d
        return self.start_direction() if t <= 0.5 else self.end_direction()

    def find_normals(
        self, point: Point, start: float = -math.inf, end: float = math.inf
    ) -> list[float]:
        return self.primitive.find_normals(self.points, point, start, end)

    def pseudo_distance(
        self, point: Point, start: float = -math.inf, end: float = math.inf
    ) -> tuple[float, float]:
        return self.primitive.pseudo_distance(self.points, point, start, end)

    def distance(self, point: Point) -> tuple[float, float]:
        return self.primitive.distance(self.points, point)


def segment_at(shape: Shape, ref: SegmentRef) -> Segment:
    """Resolve a segment reference against a shape."""
    return Segment(ref.kind, shape.segment_points(ref))
