"""Root finding with Brent's method.

`brentq` is the low-level solver and reports its outcome in a RootResult.
`find_root` wraps it for callers that need an answer or an exception, such
as the Beta quantile.

The solver is adapted from the pure-Python brentq in happy-simulator
(happysimulator/numerics/root_finding.py). This version moves the
contrapoint bracket check to the top of each iteration and halves the
absolute tolerance term.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass

from runningstats.exceptions import ConvergenceError

logger = logging.getLogger(__name__)

EPSILON = sys.float_info.epsilon


@dataclass(frozen=True, slots=True)
class RootResult:
    """Result of root finding.

    Attributes:
        root: Best estimate of the root.
        converged: Whether the bracket shrank below the tolerance.
        iterations: Number of iterations used.
        function_calls: Number of function evaluations.
    """

    root: float
    converged: bool
    iterations: int
    function_calls: int


def brentq(
    f: Callable[[float], float],
    a: float,
    b: float,
    xtol: float = 1e-12,
    rtol: float = 4 * EPSILON,
    maxiter: int = 100,
) -> RootResult:
    """Find a root of f in the bracket [a, b] using Brent's method.

    Combines bisection, the secant method and inverse quadratic
    interpolation. Always converges if f(a) and f(b) have opposite signs.

    Args:
        f: Continuous function to find the root of.
        a: Lower bracket bound.
        b: Upper bracket bound.
        xtol: Absolute tolerance on the root.
        rtol: Relative tolerance on the root.
        maxiter: Maximum number of iterations.

    Returns:
        RootResult with the root and convergence info.

    Raises:
        ValueError: If f(a) and f(b) have the same sign, or xtol <= 0.
    """
    if xtol <= 0:
        raise ValueError(f"xtol must be positive, got {xtol}")

    func_calls = 0

    def eval_f(x: float) -> float:
        nonlocal func_calls
        func_calls += 1
        return f(x)

    fa = eval_f(a)
    fb = eval_f(b)

    if fa * fb > 0:
        raise ValueError(
            f"f(a) and f(b) must have opposite signs, got f({a})={fa}, f({b})={fb}"
        )

    # c is the contrapoint: f(b) and f(c) always have opposite signs
    c, fc = a, fa
    d = e = b - a

    for iteration in range(maxiter):
        if fb * fc > 0:
            c, fc = a, fa
            d = e = b - a

        # Keep b as the best estimate so far
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol = 2.0 * rtol * abs(b) + 0.5 * xtol
        m = (c - b) / 2.0

        if abs(m) <= tol or fb == 0:
            logger.debug("brentq converged to %r after %d iterations", b, iteration)
            return RootResult(
                root=b, converged=True, iterations=iteration, function_calls=func_calls
            )

        if abs(e) >= tol and abs(fa) > abs(fb):
            s = fb / fa

            if a == c:
                # Secant step
                p = 2.0 * m * s
                q = 1.0 - s
            else:
                # Inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * m * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)

            if p > 0:
                q = -q
            else:
                p = -p

            if 2.0 * p < min(3.0 * m * q - abs(tol * q), abs(e * q)):
                e = d
                d = p / q
            else:
                d = m
                e = m
        else:
            d = m
            e = m

        a, fa = b, fb

        if abs(d) > tol:
            b = b + d
        elif m > 0:
            b = b + tol
        else:
            b = b - tol

        fb = eval_f(b)

    logger.warning("brentq did not converge within %d iterations (last root=%r)", maxiter, b)
    return RootResult(
        root=b, converged=False, iterations=maxiter, function_calls=func_calls
    )


def find_root(
    f: Callable[[float], float],
    lower: float,
    upper: float,
    accuracy: float = 1e-8,
    maxiter: int = 100,
) -> float:
    """Find a root of f in [lower, upper] or raise.

    Args:
        f: Continuous function to find the root of.
        lower: Lower bracket bound.
        upper: Upper bracket bound.
        accuracy: Absolute tolerance on the root.
        maxiter: Maximum number of iterations.

    Returns:
        The root.

    Raises:
        ConvergenceError: If the interval does not bracket a sign change or
            the iteration limit is exceeded.
    """
    try:
        result = brentq(f, lower, upper, xtol=accuracy, maxiter=maxiter)
    except ValueError as exc:
        raise ConvergenceError(
            f"no root bracketed in [{lower}, {upper}]: {exc}"
        ) from exc

    if not result.converged:
        raise ConvergenceError(
            f"root finding exceeded {maxiter} iterations in [{lower}, {upper}]"
        )
    return result.root
