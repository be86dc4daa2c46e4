"""Two-dimensional points and vectors.

This module defines the geometric foundations used everywhere else:
- Point: A location in the plane
- Vector: A displacement between two locations

Points and vectors are kept as distinct types so that the affine rules hold:
subtracting two points gives a vector, adding a vector to a point gives a
point, and points cannot be added together.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vector:
    """A displacement in 2D space.

    Immutable and hashable.

    Attributes:
        x: X component
        y: Y component
    """

    x: float
    y: float

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vector":
        return Vector(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vector":
        return Vector(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> "Vector":
        return Vector(self.x / scalar, self.y / scalar)

    def dot(self, other: "Vector") -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector") -> float:
        """Signed area of the parallelogram spanned by both vectors.

        Positive when ``other`` points to the left of ``self``.

        Examples:
            >>> Vector(1.0, 0.0).cross(Vector(0.0, 1.0))
            1.0
            >>> Vector(1.0, 0.0).cross(Vector(0.0, -1.0))
            -1.0
        """
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean norm."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Vector":
        """Unit vector in the same direction.

        The zero vector normalises to itself.
        """
        length = math.hypot(self.x, self.y)
        if length == 0.0:
            return self
        return Vector(self.x / length, self.y / length)

    def angle_to(self, other: "Vector") -> float:
        """Signed angle in radians rotating ``self`` onto ``other``."""
        return math.atan2(self.cross(other), self.dot(other))

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def is_close(self, other: "Vector", tolerance: float = 1e-9) -> bool:
        """Check whether two vectors differ by at most ``tolerance``."""
        return math.hypot(self.x - other.x, self.y - other.y) <= tolerance

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class Point:
    """A location in 2D space.

    Immutable and hashable. Uses slots so large point buffers stay compact
    when a shape is shipped to worker processes.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def __add__(self, other: Vector) -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        # Point - Point is a Vector, Point - Vector is a Point
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        return Point(self.x - other.x, self.y - other.y)

    def as_vector(self) -> Vector:
        """Position vector from the origin."""
        return Vector(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_close(self, other: "Point", tolerance: float = 1e-9) -> bool:
        """Check whether two points are at most ``tolerance`` apart."""
        return math.hypot(self.x - other.x, self.y - other.y) <= tolerance

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    @classmethod
    def of(cls, value: "Point | tuple[float, float]") -> "Point":
        """Coerce an (x, y) pair into a Point."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))
