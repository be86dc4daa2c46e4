"""Signed distance and pseudo-distance queries against a shape.

For each output channel the nearest spline carrying that channel is chosen
by true distance, with ties broken by orthogonality. The channel value is then
that spline's signed pseudo-distance: the distance to the spline extended by
straight rays tangent to its ends. Distances are positive to the left of the
direction of travel.
"""

import math

from msdforge.core.primitives import Segment, segment_at
from msdforge.domain import CHANNELS, Point, Shape, Spline, Vector

# Threshold for treating two distances as equal
EPSILON = 1e-4

# (distance, orthogonality) pair that every real candidate beats
_FARTHEST = (math.inf, -math.inf)


def closer(
    a: tuple[float, float], b: tuple[float, float], epsilon: float = EPSILON
) -> bool:
    """Check whether candidate ``a`` is nearer than ``b``.

    Candidates are (distance, orthogonality) pairs. When the distances are
    equal within ``epsilon`` the more orthogonal candidate is nearer, which
    resolves the shared endpoint of two splines at a corner.
    """
    a_dist, b_dist = abs(a[0]), abs(b[0])
    if b_dist - a_dist > epsilon:
        return True
    return abs(a_dist - b_dist) <= epsilon and abs(a[1]) > abs(b[1])


def orthogonality(tangent: Vector, offset: Vector) -> float:
    """Signed area spanned by the normalised vectors, in ``[-1, 1]``.

    Its magnitude is 1 when the vectors are perpendicular and 0 when they
    are parallel (or either is zero); its sign tells the side of ``tangent``
    that ``offset`` points to.
    """
    return tangent.normalized().cross(offset.normalized())


def spline_distance_orthogonality(
    shape: Shape, spline: Spline, point: Point, epsilon: float = EPSILON
) -> tuple[float, float]:
    """Signed distance from ``point`` to a spline, with its orthogonality.

    Returns:
        Tuple of (signed distance, orthogonality) for the nearest segment
    """
    selected = _FARTHEST
    for ref in shape.segment_refs_of(spline):
        segment = segment_at(shape, ref)
        dist, t = segment.distance(point)
        orth = orthogonality(segment.tangent(t), point - segment.sample(t))
        candidate = (dist, orth)
        if closer(candidate, selected, epsilon):
            selected = candidate
    dist, orth = selected
    return math.copysign(dist, orth), orth


def _extended_distance(segment: Segment, point: Point, t: float) -> float:
    """Signed distance to the segment at ``t``, or to the ray extending its nearer end."""
    if t < 0.0:
        direction = segment.start_direction()
        s = min(0.0, (point - segment.start).dot(direction))
        foot = segment.start + direction * s
        tangent = direction
    elif t > 1.0:
        direction = segment.end_direction()
        s = max(0.0, (point - segment.end).dot(direction))
        foot = segment.end + direction * s
        tangent = direction
    else:
        foot = segment.sample(t)
        tangent = segment.tangent(t)
    offset = point - foot
    return math.copysign(offset.length(), tangent.cross(offset))


def spline_pseudo_distance(shape: Shape, spline: Spline, point: Point) -> float:
    """Signed pseudo-distance from ``point`` to a spline.

    The spline's first segment is searched over ``(-inf, 1]``, its last over
    ``[0, inf)`` and interior segments over ``[0, 1]``; a lone segment is
    searched over the whole real line. A nearest parameter before 0 or after
    1 is measured against the tangent ray leaving that end of the segment,
    so every segment is extended on its own regardless of the others.
    """
    segments = [segment_at(shape, ref) for ref in shape.segment_refs_of(spline)]
    last = len(segments) - 1

    selected = math.inf
    for i, segment in enumerate(segments):
        start = -math.inf if i == 0 else 0.0
        end = math.inf if i == last else 1.0
        _, t = segment.pseudo_distance(point, start, end)
        dist = _extended_distance(segment, point, t)
        if abs(dist) < abs(selected):
            selected = dist
    return selected


def sample(shape: Shape, point: Point, epsilon: float = EPSILON) -> tuple[float, float, float]:
    """Sample the multi-channel signed pseudo-distance at ``point``.

    Args:
        shape: Shape to sample
        point: Query point in shape coordinates
        epsilon: Threshold for treating two distances as equal

    Returns:
        (red, green, blue) signed pseudo-distances; a channel no spline
        carries is ``-inf``
    """
    selected = [_FARTHEST] * len(CHANNELS)
    nearest: list[Spline | None] = [None] * len(CHANNELS)

    for contour in shape.contours:
        for spline in shape.splines_of(contour):
            candidate = spline_distance_orthogonality(shape, spline, point, epsilon)
            for i, channel in enumerate(CHANNELS):
                if spline.colour.has_channel(channel) and closer(candidate, selected[i], epsilon):
                    selected[i] = candidate
                    nearest[i] = spline

    red, green, blue = (
        -math.inf if spline is None else spline_pseudo_distance(shape, spline, point)
        for spline in nearest
    )
    return red, green, blue


def sample_single_channel(shape: Shape, point: Point, epsilon: float = EPSILON) -> float:
    """Sample the true signed distance at ``point`` over all splines.

    Returns ``inf`` for an empty shape.
    """
    selected = _FARTHEST
    for contour in shape.contours:
        for spline in shape.splines_of(contour):
            candidate = spline_distance_orthogonality(shape, spline, point, epsilon)
            if closer(candidate, selected, epsilon):
                selected = candidate
    return selected[0]
