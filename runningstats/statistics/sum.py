"""Running sum."""

from __future__ import annotations

import math
from typing import Self

from runningstats.statistics.base import RunningStatistic, check_finite


class Sum(RunningStatistic[float]):
    """Weighted running sum of finite numbers."""

    def __init__(self) -> None:
        self._nobs = 0
        self._value = 0.0

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def value(self) -> float:
        return self._value

    def mean(self) -> float:
        """value / nobs, or NaN when empty."""
        return self._value / self._nobs if self._nobs else math.nan

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        self._nobs += count
        self._value += value * count

    def _fit_batch(self, values: list[float]) -> None:
        self._nobs += len(values)
        self._value += math.fsum(values)

    def _merge(self, other: Sum) -> None:
        self._nobs += other._nobs
        self._value += other._value

    def reset(self) -> None:
        self._nobs = 0
        self._value = 0.0

    def clone_empty(self) -> Self:
        return type(self)()

    def __float__(self) -> float:
        return self._value

    def __repr__(self) -> str:
        return f"Sum(nobs={self._nobs}, value={self._value})"
