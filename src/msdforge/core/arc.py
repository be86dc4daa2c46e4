"""Elliptical arcs.

Arcs are stored in centre parameterisation because it can be sampled
directly, while drawing commands (SVG paths, the builder API) describe them
in endpoint parameterisation. This module converts between the two and
implements the ``EllipticalArc`` primitive.

Conversions follow the SVG implementation notes (appendix B.2.4 and B.2.5
of the SVG 1.1 specification), with out-of-range radii scaled up.
"""

import math
from dataclasses import dataclass

from msdforge.core.primitives import Primitive
from msdforge.core.roots import halleys_method
from msdforge.domain import Point, Vector
from msdforge.exceptions import ArcParameterError

# Residual of the normal equation, relative to its coefficients, under which
# a Halley estimate is accepted as a normal
_NORMAL_RESIDUAL = 1e-9


@dataclass(frozen=True, slots=True)
class CentreParam:
    """Centre parameterisation of an elliptical arc.

    Attributes:
        centre: Centre of the ellipse
        r: X radius of the ellipse
        k: Aspect ratio (y radius / x radius); a circle has ``k == 1``
        phi: Angle from the x axis to the ellipse's x axis
        theta: Start angle of the arc before stretching and rotating
        delta: Sweep angle; positive sweeps counter-clockwise
    """

    centre: Point
    r: float
    k: float
    phi: float
    theta: float
    delta: float

    @property
    def ry(self) -> float:
        return self.r * self.k

    @classmethod
    def from_points(cls, ps: tuple[Point, ...]) -> "CentreParam":
        """Decode the first four points of an arc segment."""
        return cls(
            centre=ps[0],
            r=ps[1].x,
            k=ps[1].y,
            phi=ps[2].x,
            theta=ps[3].x,
            delta=ps[3].y,
        )

    def to_points(self) -> tuple[Point, Point, Point, Point]:
        """Encode as the first four points of an arc segment."""
        return (
            self.centre,
            Point(self.r, self.k),
            Point(self.phi, 0.0),
            Point(self.theta, self.delta),
        )

    def sample_ellipse(self, angle: float) -> Point:
        """Point of the full ellipse at a local angle (ignores theta and delta)."""
        ry = self.ry
        sin_phi, cos_phi = math.sin(self.phi), math.cos(self.phi)
        sin_a, cos_a = math.sin(angle), math.cos(angle)
        return Point(
            self.r * cos_phi * cos_a - ry * sin_phi * sin_a + self.centre.x,
            self.r * sin_phi * cos_a + ry * cos_phi * sin_a + self.centre.y,
        )

    def sample_ellipse_derivative(self, angle: float) -> Vector:
        """Derivative of ``sample_ellipse`` with respect to the angle."""
        ry = self.ry
        sin_phi, cos_phi = math.sin(self.phi), math.cos(self.phi)
        sin_a, cos_a = math.sin(angle), math.cos(angle)
        return Vector(
            -self.r * cos_phi * sin_a - ry * sin_phi * cos_a,
            -self.r * sin_phi * sin_a + ry * cos_phi * cos_a,
        )

    def normal_angles(self, point: Point) -> list[float]:
        """Local angles in ``[0, 2*pi)`` where the ellipse's normal passes through ``point``.

        Solves ``N(a) = (E(a) - P) . E'(a) = 0`` in the ellipse's own frame,
        which expands to::

            N(a) = 1/2 (ry^2 - rx^2) sin 2a - rx dx sin a + ry dy cos a

        where ``(dx, dy)`` is ``C - P`` rotated by ``-phi``. Halley's method
        is started from the angle the point would have on a circle, its
        antipode, the same angle corrected for the aspect ratio, and the
        four axis angles. Estimates whose residual is not small are dropped.
        """
        ry = self.ry
        sin_phi, cos_phi = math.sin(self.phi), math.cos(self.phi)
        offset = self.centre - point
        dx = cos_phi * offset.x + sin_phi * offset.y
        dy = -sin_phi * offset.x + cos_phi * offset.y

        m = 0.5 * (ry * ry - self.r * self.r)
        n = -self.r * dx
        o = ry * dy

        def f(a: float) -> float:
            return m * math.sin(2.0 * a) + n * math.sin(a) + o * math.cos(a)

        def df(a: float) -> float:
            return 2.0 * m * math.cos(2.0 * a) + n * math.cos(a) - o * math.sin(a)

        def ddf(a: float) -> float:
            return -4.0 * m * math.sin(2.0 * a) - n * math.sin(a) - o * math.cos(a)

        circle_guess = math.atan2(-dy, -dx)
        seeds = [circle_guess, circle_guess + math.pi]
        if self.r != 0.0 and ry != 0.0:
            seeds.append(math.atan2(-dy / ry, -dx / self.r))
        seeds.extend(i * math.pi / 2.0 for i in range(4))

        tolerance = _NORMAL_RESIDUAL * (abs(m) + abs(n) + abs(o))
        angles: list[float] = []
        for seed in seeds:
            angle = halleys_method(seed, f, df, ddf) % math.tau
            if abs(f(angle)) > tolerance:
                continue
            if math.tau - angle < 1e-9:
                angle = 0.0
            if any(abs(angle - known) < 1e-9 for known in angles):
                continue
            angles.append(angle)
        return sorted(angles)

    def to_endpoint(self) -> "EndpointParam":
        """Convert to the endpoint parameterisation used by SVG."""
        return EndpointParam(
            start=self.sample_ellipse(self.theta),
            rx=self.r,
            ry=self.ry,
            phi=self.phi,
            large_arc=abs(self.delta) > math.pi,
            sweep_ccw=self.delta > 0.0,
            end=self.sample_ellipse(self.theta + self.delta),
        )


@dataclass(frozen=True, slots=True)
class EndpointParam:
    """Endpoint parameterisation of an elliptical arc, as in SVG paths.

    Attributes:
        start: Starting point of the arc
        rx: X radius of the ellipse
        ry: Y radius of the ellipse
        phi: Angle from the x axis to the ellipse's x axis
        large_arc: Take the arc sweeping more than 180 degrees
        sweep_ccw: Sweep counter-clockwise (positive angle direction)
        end: Final point of the arc
    """

    start: Point
    rx: float
    ry: float
    phi: float
    large_arc: bool
    sweep_ccw: bool
    end: Point

    def is_degenerate(self) -> bool:
        """Check whether the arc collapses to a straight line (a zero radius)."""
        return self.rx == 0.0 or self.ry == 0.0

    def to_centre(self) -> CentreParam:
        """Convert to centre parameterisation.

        Radii are made absolute and scaled up uniformly when no ellipse with
        the given radii can pass through both endpoints. Coincident endpoints
        with ``large_arc`` set describe a full ellipse starting at local
        angle pi.

        Raises:
            ArcParameterError: If a parameter is not finite, a radius is
                zero, or the endpoints coincide without ``large_arc``
        """
        values = (self.rx, self.ry, self.phi, *self.start.to_tuple(), *self.end.to_tuple())
        if not all(math.isfinite(v) for v in values):
            raise ArcParameterError(f"Arc parameters must be finite: {self}")
        if self.is_degenerate():
            raise ArcParameterError("Arc with a zero radius is a straight line")

        rx, ry = abs(self.rx), abs(self.ry)
        sin_phi, cos_phi = math.sin(self.phi), math.cos(self.phi)

        if self.start == self.end:
            if not self.large_arc:
                raise ArcParameterError("Arc with coincident endpoints describes nothing")
            centre = self.start + Vector(cos_phi * rx, sin_phi * rx)
            delta = math.tau if self.sweep_ccw else -math.tau
            return CentreParam(centre, rx, ry / rx, self.phi, math.pi, delta)

        # Step 1: midpoint offset in the ellipse's frame
        half = (self.start - self.end) / 2.0
        x1 = cos_phi * half.x + sin_phi * half.y
        y1 = -sin_phi * half.x + cos_phi * half.y

        # Radii too small to reach both endpoints
        ratio = (x1 * x1) / (rx * rx) + (y1 * y1) / (ry * ry)
        if ratio > 1.0:
            scale = math.sqrt(ratio)
            rx *= scale
            ry *= scale
        rx2, ry2 = rx * rx, ry * ry

        # Step 2: centre in the ellipse's frame
        denominator = rx2 * y1 * y1 + ry2 * x1 * x1
        q = math.sqrt(max(0.0, (rx2 * ry2 - denominator) / denominator))
        if self.large_arc == self.sweep_ccw:
            q = -q
        cx1 = q * rx * y1 / ry
        cy1 = -q * ry * x1 / rx

        # Step 3: back to user space
        centre = Point(
            cos_phi * cx1 - sin_phi * cy1 + (self.start.x + self.end.x) / 2.0,
            sin_phi * cx1 + cos_phi * cy1 + (self.start.y + self.end.y) / 2.0,
        )

        # Step 4: start and sweep angles
        u = Vector((x1 - cx1) / rx, (y1 - cy1) / ry)
        v = Vector((-x1 - cx1) / rx, (-y1 - cy1) / ry)
        theta = Vector(1.0, 0.0).angle_to(u)
        delta = u.angle_to(v) % math.tau
        if not self.sweep_ccw and delta > 0.0:
            delta -= math.tau

        return CentreParam(centre, rx, ry / rx, self.phi, theta, delta)


def _nearest_representative(t: float, period: float, start: float, end: float) -> float | None:
    """Shift ``t`` by whole periods to the value in ``[start, end]`` closest to ``[0, 1]``."""
    k = round((0.5 - t) / period)
    candidates = [t + i * period for i in range(k - 2, k + 3)]
    in_range = [c for c in candidates if start <= c <= end]
    if not in_range:
        return None
    return min(in_range, key=lambda c: max(-c, c - 1.0, 0.0))


class EllipticalArc(Primitive):
    """Elliptical arc stored as ``CentreParam.to_points()`` plus the end point.

    Sampling beyond ``[0, 1]`` keeps travelling around the ellipse.
    """

    @classmethod
    def sample(cls, ps: tuple[Point, ...], t: float) -> Point:
        params = CentreParam.from_points(ps)
        return params.sample_ellipse(params.theta + t * params.delta)

    @classmethod
    def sample_derivative(cls, ps: tuple[Point, ...], t: float) -> Vector:
        params = CentreParam.from_points(ps)
        return params.sample_ellipse_derivative(params.theta + t * params.delta) * params.delta

    @classmethod
    def find_normals(
        cls, ps: tuple[Point, ...], point: Point, start: float, end: float
    ) -> list[float]:
        params = CentreParam.from_points(ps)
        if params.delta == 0.0:
            return []
        period = math.tau / abs(params.delta)
        ts: list[float] = []
        for angle in params.normal_angles(point):
            t = _nearest_representative(
                (angle - params.theta) / params.delta, period, start, end
            )
            if t is not None:
                ts.append(t)
        return ts

    @classmethod
    def start_point(cls, ps: tuple[Point, ...]) -> Point:
        return cls.sample(ps, 0.0)

    @classmethod
    def start_direction(cls, ps: tuple[Point, ...]) -> Vector:
        params = CentreParam.from_points(ps)
        d = params.sample_ellipse_derivative(params.theta)
        return (d * math.copysign(1.0, params.delta)).normalized()

    @classmethod
    def end_direction(cls, ps: tuple[Point, ...]) -> Vector:
        params = CentreParam.from_points(ps)
        d = params.sample_ellipse_derivative(params.theta + params.delta)
        return (d * math.copysign(1.0, params.delta)).normalized()
