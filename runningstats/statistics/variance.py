"""Running variance (Welford's algorithm generalised to weighted counts)."""

from __future__ import annotations

import math
from typing import Self

from runningstats.statistics.base import (
    RunningStatistic,
    bessel_correction,
    check_finite,
    smooth,
)


class Variance(RunningStatistic[float]):
    """Tracks the mean and variance of a stream of finite numbers.

    Internally keeps the mean and the population (uncorrected) variance,
    both updated by smoothing. Two accumulators are combined with the
    parallel variance formula:

        g = n_other / n_total
        delta = mean_self - mean_other
        var = smooth(var_self, var_other, g) + delta**2 * g * (1 - g)

    which is exact for the population variance of the union.

    `value` reports the bias-corrected sample variance.
    """

    def __init__(self) -> None:
        self._nobs = 0
        self._mean = 0.0
        self._variance = 0.0

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def mean(self) -> float:
        """The mean, or NaN before any observation."""
        return self._mean if self._nobs > 0 else math.nan

    @property
    def value(self) -> float:
        """Bias-corrected sample variance.

        NaN when empty, 0 with a single (finite) observation.
        """
        if self._nobs > 1:
            return self._variance * bessel_correction(self._nobs)
        if self._nobs == 1:
            return 0.0 if math.isfinite(self._mean) else math.nan
        return math.nan

    @property
    def std(self) -> float:
        """Sample standard deviation."""
        return math.sqrt(self.value)

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        self._nobs += count
        g = count / self._nobs
        old_mean = self._mean
        self._mean = smooth(self._mean, value, g)
        self._variance = smooth(self._variance, (value - self._mean) * (value - old_mean), g)

    def _fit_batch(self, values: list[float]) -> None:
        n = len(values)
        batch_mean = math.fsum(values) / n
        batch_variance = math.fsum((v - batch_mean) ** 2 for v in values) / n
        self._combine(n, batch_mean, batch_variance)

    def _merge(self, other: Variance) -> None:
        self._combine(other._nobs, other._mean, other._variance)

    def _combine(self, n: int, mean: float, variance: float) -> None:
        if n == 0:
            return
        self._nobs += n
        g = n / self._nobs
        delta = self._mean - mean
        self._variance = smooth(self._variance, variance, g) + delta * delta * g * (1 - g)
        self._mean = smooth(self._mean, mean, g)

    def reset(self) -> None:
        self._nobs = 0
        self._mean = 0.0
        self._variance = 0.0

    def clone_empty(self) -> Self:
        return type(self)()

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Variance(nobs={self._nobs}, mean={self.mean}, value={self.value})"
