"""Running first four moments of a stream."""

from __future__ import annotations

import math
from typing import Self

from runningstats.statistics.base import (
    RunningStatistic,
    bessel_correction,
    check_finite,
    smooth,
)


class Moments(RunningStatistic[float]):
    """Tracks the first four non-central moments E[x], E[x^2], E[x^3], E[x^4].

    Each raw moment is updated by smoothing with weight count / nobs and
    merged the same way with weight n_other / n_total, so merging is exact
    up to rounding. Central quantities are derived on query:

    - variance: bias-corrected, Bessel(n) * (E[x^2] - mean^2)
    - skewness: third standardised central moment (population)
    - kurtosis: *excess* kurtosis, fourth standardised central moment minus 3,
      so a normal distribution scores 0

    Raw moments lose precision when the mean is large relative to the
    spread; prefer Variance when only the second moment is needed.
    """

    def __init__(self) -> None:
        self._nobs = 0
        self._m1 = 0.0
        self._m2 = 0.0
        self._m3 = 0.0
        self._m4 = 0.0

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def mean(self) -> float:
        return self._m1 if self._nobs > 0 else math.nan

    @property
    def variance(self) -> float:
        """Bias-corrected sample variance (0 with a single observation)."""
        if self._nobs == 0:
            return math.nan
        if self._nobs == 1:
            return 0.0
        return bessel_correction(self._nobs) * self._central_second()

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def skewness(self) -> float:
        """Population skewness; NaN when empty or when all values are equal."""
        v = self._central_second()
        if self._nobs == 0 or v <= 0:
            return math.nan
        mean = self._m1
        return (self._m3 - 3.0 * mean * v - mean**3) / v**1.5

    @property
    def kurtosis(self) -> float:
        """Excess kurtosis; NaN when empty or when all values are equal."""
        v = self._central_second()
        if self._nobs == 0 or v <= 0:
            return math.nan
        mean = self._m1
        mean2 = mean * mean
        fourth = self._m4 - 4.0 * mean * self._m3 + 6.0 * mean2 * self._m2 - 3.0 * mean2 * mean2
        return fourth / (v * v) - 3.0

    def _central_second(self) -> float:
        return self._m2 - self._m1 * self._m1

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        self._nobs += count
        g = count / self._nobs
        y2 = value * value
        self._m1 = smooth(self._m1, value, g)
        self._m2 = smooth(self._m2, y2, g)
        self._m3 = smooth(self._m3, value * y2, g)
        self._m4 = smooth(self._m4, y2 * y2, g)

    def _merge(self, other: Moments) -> None:
        if other._nobs == 0:
            return
        self._nobs += other._nobs
        g = other._nobs / self._nobs
        self._m1 = smooth(self._m1, other._m1, g)
        self._m2 = smooth(self._m2, other._m2, g)
        self._m3 = smooth(self._m3, other._m3, g)
        self._m4 = smooth(self._m4, other._m4, g)

    def reset(self) -> None:
        self._nobs = 0
        self._m1 = self._m2 = self._m3 = self._m4 = 0.0

    def clone_empty(self) -> Self:
        return type(self)()

    def __iter__(self):
        """Unpack as (mean, variance, skewness, kurtosis)."""
        return iter((self.mean, self.variance, self.skewness, self.kurtosis))

    def __repr__(self) -> str:
        return (
            f"Moments(nobs={self._nobs}, mean={self.mean:.4g}, variance={self.variance:.4g}, "
            f"skewness={self.skewness:.4g}, kurtosis={self.kurtosis:.4g})"
        )
