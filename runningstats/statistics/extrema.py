"""Running minimum and maximum, with tie counts."""

from __future__ import annotations

import math
import sys
from typing import Any, Self

from runningstats.exceptions import InsufficientDataError
from runningstats.statistics.base import RunningStatistic, check_finite

DEFAULT_FLOAT_TOLERANCE = math.sqrt(sys.float_info.epsilon)


class GenericExtrema[T](RunningStatistic[T]):
    """Tracks the minimum and maximum of a stream of ordered values.

    Also counts how many observations equal the current minimum and maximum.
    Two values are "equal" when they differ by at most `tolerance`; with the
    default tolerance of 0 plain `==` is used, so any type supporting `<`,
    `>` and `==` works (dates, strings, Decimals, ...). A positive tolerance
    additionally needs subtraction and abs().

    Querying min/max before any observation raises InsufficientDataError.

    Args:
        tolerance: Non-negative equality tolerance.

    Example:
        extrema = GenericExtrema[str]()
        extrema.fit_many(["pear", "apple", "fig", "apple"])
        extrema.min, extrema.min_count  # ("apple", 2)
    """

    def __init__(self, tolerance: Any = 0):
        if tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {tolerance}")
        self._tolerance = tolerance
        self._nobs = 0
        self._min: T | None = None
        self._max: T | None = None
        self._min_count = 0
        self._max_count = 0

    @property
    def tolerance(self) -> Any:
        return self._tolerance

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def min(self) -> T:
        """Smallest value seen."""
        self._require_data()
        return self._min

    @property
    def max(self) -> T:
        """Largest value seen."""
        self._require_data()
        return self._max

    @property
    def min_count(self) -> int:
        """Number of observations equal to the minimum (within tolerance)."""
        return self._min_count

    @property
    def max_count(self) -> int:
        """Number of observations equal to the maximum (within tolerance)."""
        return self._max_count

    @property
    def range(self) -> Any:
        """max - min."""
        return self.max - self.min

    def _require_data(self) -> None:
        if self._nobs == 0:
            raise InsufficientDataError(f"{type(self).__name__} has no observations")

    def _is_close(self, a: T, b: T) -> bool:
        if self._tolerance == 0:
            return a == b
        return abs(a - b) <= self._tolerance

    def _fit(self, value: T, count: int) -> None:
        if self._nobs == 0:
            self._min = self._max = value
            self._min_count = self._max_count = count
            self._nobs = count
            return

        # A strictly new extreme always replaces the old one, ties are counted after
        if value < self._min:
            self._min, self._min_count = value, 0
        elif value > self._max:
            self._max, self._max_count = value, 0

        if self._is_close(value, self._min):
            self._min_count += count
        if self._is_close(value, self._max):
            self._max_count += count

        self._nobs += count

    def _merge(self, other: GenericExtrema[T]) -> None:
        if other._nobs == 0:
            return
        if self._nobs == 0:
            self._min, self._min_count = other._min, other._min_count
            self._max, self._max_count = other._max, other._max_count
            self._nobs = other._nobs
            return

        if self._is_close(self._min, other._min):
            self._min = min(self._min, other._min)
            self._min_count += other._min_count
        elif other._min < self._min:
            self._min, self._min_count = other._min, other._min_count

        if self._is_close(self._max, other._max):
            self._max = max(self._max, other._max)
            self._max_count += other._max_count
        elif other._max > self._max:
            self._max, self._max_count = other._max, other._max_count

        self._nobs += other._nobs

    def reset(self) -> None:
        self._nobs = 0
        self._min = self._max = None
        self._min_count = self._max_count = 0

    def clone_empty(self) -> Self:
        return type(self)(self._tolerance)

    def __repr__(self) -> str:
        if self._nobs == 0:
            return f"{type(self).__name__}(nobs=0)"
        return (
            f"{type(self).__name__}(nobs={self._nobs}, min={self._min!r} (n={self._min_count}), "
            f"max={self._max!r} (n={self._max_count}))"
        )


class Extrema(GenericExtrema[float]):
    """Minimum and maximum of a stream of finite floats.

    Values within `tolerance` (default sqrt(machine epsilon)) of the current
    extreme count as ties, which absorbs floating-point representation error.
    A value strictly beyond the current extreme still replaces it, however
    close, so min and max are always exact. NaN and infinite values are
    rejected.
    """

    def __init__(self, tolerance: float = DEFAULT_FLOAT_TOLERANCE):
        super().__init__(tolerance)

    def _check(self, value: float) -> None:
        check_finite(value)
