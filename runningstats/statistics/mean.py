"""Running arithmetic mean."""

from __future__ import annotations

import math
from typing import Self

from runningstats.statistics.base import RunningStatistic, check_finite, smooth


class Mean(RunningStatistic[float]):
    """Tracks the mean of a stream of finite numbers.

    The estimate is updated by exponential smoothing with weight
    count / nobs instead of keeping a running sum, which avoids the
    cancellation error of large sums over long streams.

    Example:
        mean = Mean()
        mean.fit_many(range(1, 1001))
        mean.value  # 500.5
    """

    def __init__(self) -> None:
        self._nobs = 0
        self._value = 0.0

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def value(self) -> float:
        """The mean, or NaN before any observation."""
        return self._value if self._nobs > 0 else math.nan

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        self._nobs += count
        self._value = smooth(self._value, value, count / self._nobs)

    def _fit_batch(self, values: list[float]) -> None:
        self._nobs += len(values)
        batch_mean = math.fsum(values) / len(values)
        self._value = smooth(self._value, batch_mean, len(values) / self._nobs)

    def _merge(self, other: Mean) -> None:
        if other._nobs == 0:
            return
        self._nobs += other._nobs
        self._value = smooth(self._value, other._value, other._nobs / self._nobs)

    def reset(self) -> None:
        self._nobs = 0
        self._value = 0.0

    def clone_empty(self) -> Self:
        return type(self)()

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Mean(nobs={self._nobs}, value={self.value})"
