"""Polynomial and transcendental root finding.

This module provides the solvers behind every curve-distance query:
- aberth: All complex roots of a polynomial, refined simultaneously
- roots_in_range: Real roots of a polynomial inside a parameter range
- halleys_method: A zero of a twice differentiable function

Polynomials are given as coefficient sequences in ascending order of degree,
so ``[a0, a1, a2]`` is ``a0 + a1*x + a2*x**2``.
"""

import cmath
import math
from collections.abc import Callable, Sequence

import structlog

from msdforge.exceptions import RootFindingError

logger = structlog.get_logger(__name__)

# Threshold used to decide when a root has been found
EPSILON = 5e-5

# Iteration bound for Aberth's method
MAX_ITERATIONS = 100

# Leading coefficients smaller than this fraction of the largest are dropped
_DEGENERATE_RATIO = 1e-12

# Angle of the first starting guess; no two guesses may mirror each other
# about either axis through the shift point
_GUESS_ANGLE = 0.4


def sample_polynomial(coefficients: Sequence[float], x: complex) -> complex:
    """Evaluate a polynomial at ``x`` using Horner's scheme.

    Examples:
        >>> sample_polynomial([0.0, 1.0, 2.0, 3.0, 4.0], 1.0)
        10.0
    """
    result: complex = 0.0
    for coefficient in reversed(coefficients):
        result = result * x + coefficient
    return result


def derivative(coefficients: Sequence[float]) -> list[float]:
    """Compute the coefficients of a polynomial's derivative.

    Examples:
        >>> derivative([0.0, 1.0, 2.0, 3.0, 4.0])
        [1.0, 4.0, 9.0, 16.0]
    """
    return [power * c for power, c in enumerate(coefficients) if power > 0]


def _strip_leading_zeros(coefficients: Sequence[float]) -> list[float]:
    """Drop vanishing highest-degree coefficients."""
    trimmed = [float(c) for c in coefficients]
    largest = max((abs(c) for c in trimmed), default=0.0)
    while trimmed and abs(trimmed[-1]) <= largest * _DEGENERATE_RATIO:
        trimmed.pop()
    return trimmed


def _taylor_shift(coefficients: Sequence[float], shift: float) -> list[float]:
    """Coefficients of ``p(x + shift)``."""
    c = list(coefficients)
    n = len(c) - 1
    for i in range(n):
        for k in range(n - 1, i - 1, -1):
            c[k] += shift * c[k + 1]
    return c


def _bound_radius(monic: Sequence[float]) -> int:
    """Smallest positive integer ``r`` with ``S(r) >= 0``.

    ``S(w) = w**n - sum(|b_k| * w**k for k < n)`` has a single positive root
    which bounds the moduli of all roots of the monic polynomial ``b``.
    """
    lower_terms = [abs(b) for b in monic[:-1]]

    def s(w: int) -> float:
        return w ** (len(monic) - 1) - sum(b * w**k for k, b in enumerate(lower_terms))

    high = 1
    while s(high) < 0:
        high *= 2
    low = high // 2
    while high - low > 1:
        mid = (low + high) // 2
        if s(mid) >= 0:
            high = mid
        else:
            low = mid
    return high


def initial_guesses(coefficients: Sequence[float]) -> list[complex]:
    """Place one starting point per root on a circle enclosing all roots.

    The polynomial is made monic and shifted so that its second-highest
    term vanishes; the guesses are spread evenly in angle around the shift
    point at the radius given by the root-modulus bound.
    """
    n = len(coefficients) - 1
    leading = coefficients[-1]
    monic = [c / leading for c in coefficients]
    shift = -monic[-2] / n
    radius = _bound_radius(_taylor_shift(monic, shift))
    return [
        shift + radius * cmath.exp(1j * (math.tau * k / n + _GUESS_ANGLE))
        for k in range(n)
    ]


def aberth(
    coefficients: Sequence[float],
    epsilon: float = EPSILON,
    max_iterations: int = MAX_ITERATIONS,
) -> list[complex]:
    """Find all complex roots of a polynomial with Aberth's method.

    All estimates are refined together using the Aberth-Ehrlich correction
    until every root moves less than ``epsilon`` in both its real and
    imaginary parts, or ``max_iterations`` is reached.

    Args:
        coefficients: Polynomial coefficients, lowest degree first
        epsilon: Convergence threshold
        max_iterations: Iteration bound

    Returns:
        One complex root per degree of the (trimmed) polynomial, in no
        particular order. Constant polynomials have no roots.

    Raises:
        RootFindingError: If an iterate becomes NaN or infinite, which
            happens for degenerate polynomials with coincident estimates

    Examples:
        >>> roots = aberth([-28.0, 39.0, -12.0, 1.0])
        >>> sorted(round(z.real, 3) for z in roots)
        [1.0, 4.0, 7.0]
    """
    polynomial = _strip_leading_zeros(coefficients)
    if len(polynomial) < 2:
        return []

    dydx = derivative(polynomial)
    zs = initial_guesses(polynomial)

    for _ in range(max_iterations):
        converged = True
        next_zs: list[complex] = []
        for i, z in enumerate(zs):
            p = sample_polynomial(polynomial, z)
            if p == 0:
                next_zs.append(z)
                continue
            dp = sample_polynomial(dydx, z)
            try:
                repulsion = sum(1.0 / (z - w) for k, w in enumerate(zs) if k != i)
                delta = p / (p * repulsion - dp)
            except ZeroDivisionError as e:
                raise RootFindingError(list(coefficients), "division by a vanishing difference") from e
            z_next = z + delta
            if not cmath.isfinite(z_next):
                raise RootFindingError(list(coefficients), f"non-finite iterate {z_next}")
            if abs(delta.real) >= epsilon or abs(delta.imag) >= epsilon:
                converged = False
            next_zs.append(z_next)
        zs = next_zs
        if converged:
            return zs

    logger.debug(
        "Root finder reached iteration bound",
        coefficients=list(coefficients),
        iterations=max_iterations,
    )
    return zs


def roots_in_range(
    polynomial: Sequence[float],
    start: float = -math.inf,
    end: float = math.inf,
    epsilon: float = EPSILON,
) -> list[float]:
    """Find the real roots of a polynomial inside ``[start, end]``.

    A root counts as real when its imaginary part is within ``epsilon`` of
    zero.

    Args:
        polynomial: Coefficients, lowest degree first
        start: Lower bound of the range (may be -inf)
        end: Upper bound of the range (may be inf)
        epsilon: Convergence and realness threshold

    Returns:
        Real parts of the matching roots
    """
    return [
        z.real
        for z in aberth(polynomial, epsilon)
        if abs(z.imag) <= epsilon and start <= z.real <= end
    ]


def halleys_method(
    x: float,
    f: Callable[[float], float],
    df: Callable[[float], float],
    ddf: Callable[[float], float],
    tolerance: float = 1e-12,
    max_iterations: int = 100,
) -> float:
    """Find a zero of a twice differentiable function.

    Args:
        x: Initial guess
        f: The function
        df: Its first derivative
        ddf: Its second derivative
        tolerance: Stop once a step is smaller than this
        max_iterations: Iteration bound

    Returns:
        The final estimate; callers must judge its quality themselves
    """
    for _ in range(max_iterations):
        fx = f(x)
        if fx == 0.0:
            return x
        dfx = df(x)
        denominator = 2.0 * dfx * dfx - fx * ddf(x)
        if denominator == 0.0:
            return x
        step = 2.0 * fx * dfx / denominator
        x -= step
        if abs(step) < tolerance:
            return x
    return x
