"""Beta-Bernoulli conjugate statistic."""

from __future__ import annotations

import math
from typing import Self

from runningstats.numerics.root_finding import find_root
from runningstats.numerics.special import beta_regularized, log_beta
from runningstats.statistics.base import RunningStatistic, check_count

QUANTILE_ACCURACY = 1e-12
QUANTILE_MAX_ITERATIONS = 200


class Beta(RunningStatistic[bool]):
    """Counts successes and failures of a Bernoulli process.

    The counts a (successes) and b (failures) are the parameters of a
    Beta(a, b) distribution over the success probability, from which the
    density, CDF and quantiles are derived. Empty-state queries return NaN.

    Args:
        successes: Initial number of successes.
        failures: Initial number of failures.

    Example:
        beta = Beta()
        for converted in outcomes:
            beta.fit(converted)
        low, high = beta.quantile(0.025), beta.quantile(0.975)
    """

    def __init__(self, successes: int = 0, failures: int = 0):
        self._a = check_count(successes)
        self._b = check_count(failures)

    @property
    def nobs(self) -> int:
        return self._a + self._b

    @property
    def successes(self) -> int:
        return self._a

    @property
    def failures(self) -> int:
        return self._b

    @property
    def mean(self) -> float:
        n = self.nobs
        return self._a / n if n else math.nan

    @property
    def variance(self) -> float:
        n = self.nobs
        if n == 0:
            return math.nan
        return self._a * self._b / (n * n * (n + 1))

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def mode(self) -> float:
        """(a - 1) / (a + b - 2); NaN unless both counts exceed 1."""
        if self._a > 1 and self._b > 1:
            return (self._a - 1) / (self.nobs - 2)
        return math.nan

    @property
    def median(self) -> float:
        """Exact median; NaN unless both counts exceed 1."""
        if self._a > 1 and self._b > 1:
            return self.quantile(0.5)
        return math.nan

    def _check(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise ValueError(f"Beta observations must be bool, got {type(value).__name__}")

    def _fit(self, value: bool, count: int) -> None:
        if value:
            self._a += count
        else:
            self._b += count

    def fit_outcomes(self, successes: int = 0, failures: int = 0) -> None:
        """Add counts of successes and failures at once.

        Raises:
            ValueError: If either count is negative.
        """
        successes = check_count(successes)
        failures = check_count(failures)
        self._a += successes
        self._b += failures

    def _merge(self, other: Beta) -> None:
        self._a += other._a
        self._b += other._b

    def reset(self) -> None:
        self._a = 0
        self._b = 0

    def clone_empty(self) -> Self:
        return type(self)()

    def pdf(self, x: float) -> float:
        """Density of Beta(a, b) at x.

        Zero outside [0, 1]. With a zero count the distribution degenerates
        to a point mass at 0 or 1, reported as an infinite density there.
        """
        a, b = self._a, self._b
        if not 0 <= x <= 1:
            return 0.0
        if a == 0 and b == 0:
            return math.nan
        if a == 0:
            return math.inf if x == 0 else 0.0
        if b == 0:
            return math.inf if x == 1 else 0.0
        if a == 1 and b == 1:
            return 1.0
        return math.exp(self._log_pdf(x))

    def _log_pdf(self, x: float) -> float:
        a, b = self._a, self._b
        # 0 * log(0) terms vanish when the exponent is zero
        if x == 0:
            log_x = 0.0 if a == 1 else -math.inf
        else:
            log_x = (a - 1) * math.log(x)
        if x == 1:
            log_1mx = 0.0 if b == 1 else -math.inf
        else:
            log_1mx = (b - 1) * math.log1p(-x)
        return log_x + log_1mx - log_beta(a, b)

    def cdf(self, x: float) -> float:
        """Probability that the success rate is <= x, i.e. I_x(a, b)."""
        a, b = self._a, self._b
        if a == 0 and b == 0:
            return math.nan
        if x < 0:
            return 0.0
        if x >= 1:
            return 1.0
        if a == 0:
            return 1.0
        if b == 0:
            return 0.0
        if a == 1 and b == 1:
            return x
        return beta_regularized(a, b, x)

    def quantile(self, p: float) -> float:
        """Success rate x with cdf(x) == p, found with Brent's method.

        Raises:
            ValueError: If p is not in [0, 1].
            ConvergenceError: If the root finder fails.
        """
        if not 0 <= p <= 1:
            raise ValueError(f"Quantile must be in [0, 1], got {p}")

        a, b = self._a, self._b
        if a == 0 and b == 0:
            return math.nan
        if a == 0:
            return 0.0
        if b == 0:
            return 1.0
        if p == 0 or p == 1:
            return float(p)
        if a == 1 and b == 1:
            return p

        return find_root(
            lambda x: beta_regularized(a, b, x) - p,
            0.0,
            1.0,
            accuracy=QUANTILE_ACCURACY,
            maxiter=QUANTILE_MAX_ITERATIONS,
        )

    def percentile(self, p: float) -> float:
        """Success rate at percentile p (0 to 100)."""
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.quantile(p / 100.0)

    def __repr__(self) -> str:
        return f"Beta(successes={self._a}, failures={self._b})"
