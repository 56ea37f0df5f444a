"""Normal distribution fitted to a stream."""

from __future__ import annotations

import math
from typing import Self

from runningstats.numerics.root_finding import find_root
from runningstats.numerics.special import erfc
from runningstats.statistics.base import RunningStatistic, check_finite
from runningstats.statistics.mean import Mean
from runningstats.statistics.variance import Variance

# Quantile search bracket, in standard deviations from the mean
_QUANTILE_SPAN = 40.0
_QUANTILE_MAX_ITERATIONS = 200


class Normal(RunningStatistic[float]):
    """Fits a normal distribution from the running mean and sample variance.

    pdf, cdf and quantile return NaN until two observations have been seen
    or while all observations are identical (zero variance).
    """

    def __init__(self) -> None:
        self._mean = Mean()
        self._variance = Variance()

    @property
    def nobs(self) -> int:
        return self._mean.nobs

    @property
    def mean(self) -> float:
        return self._mean.value

    @property
    def variance(self) -> float:
        """Bias-corrected sample variance."""
        return self._variance.value

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    def _is_degenerate(self) -> bool:
        return not self.variance > 0

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        self._mean.fit(value, count)
        self._variance.fit(value, count)

    def _fit_batch(self, values: list[float]) -> None:
        self._mean.fit_many(values)
        self._variance.fit_many(values)

    def _merge(self, other: Normal) -> None:
        self._mean.merge(other._mean)
        self._variance.merge(other._variance)

    def reset(self) -> None:
        self._mean.reset()
        self._variance.reset()

    def clone_empty(self) -> Self:
        return type(self)()

    def pdf(self, x: float) -> float:
        if self._is_degenerate():
            return math.nan
        z = (x - self.mean) / self.std
        return math.exp(-0.5 * z * z) / (math.sqrt(2 * math.pi) * self.std)

    def cdf(self, x: float) -> float:
        if self._is_degenerate():
            return math.nan
        return 0.5 * erfc((self.mean - x) / (self.std * math.sqrt(2)))

    def quantile(self, p: float) -> float:
        """Value x with cdf(x) == p.

        Raises:
            ValueError: If p is not in [0, 1].
        """
        if not 0 <= p <= 1:
            raise ValueError(f"Quantile must be in [0, 1], got {p}")
        if self._is_degenerate():
            return math.nan
        if p == 0:
            return -math.inf
        if p == 1:
            return math.inf

        mean, std = self.mean, self.std
        return find_root(
            lambda x: self.cdf(x) - p,
            mean - _QUANTILE_SPAN * std,
            mean + _QUANTILE_SPAN * std,
            accuracy=1e-12 * max(1.0, std),
            maxiter=_QUANTILE_MAX_ITERATIONS,
        )

    def percentile(self, p: float) -> float:
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.quantile(p / 100.0)

    def __repr__(self) -> str:
        return f"Normal(nobs={self.nobs}, mean={self.mean}, variance={self.variance})"
