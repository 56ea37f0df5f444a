"""Base protocol for mergeable running statistics.

A running statistic consumes a stream of observations in a single pass,
keeps only the sufficient statistics it needs, and can absorb another
statistic of the same kind as if it had seen that statistic's observations
itself. This is what lets partial results computed on separate workers or
partitions be combined afterwards.

This module defines:
- RunningStatistic: the fit/merge/clone/reset contract every statistic follows
- merge: a combinator that merges several statistics into a new one without
  touching its arguments
- smooth, bessel_correction, check_finite: helpers shared by the
  floating-point statistics
"""

from __future__ import annotations

import math
import operator
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Self

__all__ = [
    "RunningStatistic",
    "bessel_correction",
    "check_count",
    "check_finite",
    "merge",
    "smooth",
]


def smooth(a: float, b: float, weight: float) -> float:
    """Move a towards b by the given weight: a + weight * (b - a)."""
    return a + weight * (b - a)


def bessel_correction(n: int) -> float:
    """Factor n / (n - 1) that turns a population variance into a sample one."""
    return n / (n - 1)


def check_finite(value: float) -> None:
    """Raise ValueError unless value is a finite number."""
    if not math.isfinite(value):
        raise ValueError(f"value must be finite, got {value}")


def check_count(count: int) -> int:
    """Validate an observation count and return it as an int.

    Raises:
        TypeError: If count is not an integer.
        ValueError: If count is negative.
    """
    count = operator.index(count)
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return count


class RunningStatistic[TObs](ABC):
    """Base protocol for all running statistics.

    Subclasses implement `_fit` (apply one already validated observation),
    `_merge`, `reset`, `clone_empty` and `nobs`, and override `_check` to
    validate observations. Everything else is shared:

    - fit(value, count=1): add one observation, optionally repeated
    - fit_many(values): add several observations, each with count 1
    - fit_counts(pairs): add (value, count) pairs or a value -> count mapping
    - merge(other): absorb a statistic of the same kind, in place
    - unsafe_merge(other): merge with a statistic of unknown kind
    - clone() / clone_empty(): deep copy / fresh copy with the same settings

    Validation always runs before any state changes, so a call that raises
    leaves the statistic exactly as it was.

    Instances are not thread-safe. Fit separate instances per thread and
    combine them with merge().
    """

    @property
    @abstractmethod
    def nobs(self) -> int:
        """Total (count-weighted) number of observations fitted."""

    def fit(self, value: TObs, count: int = 1) -> None:
        """Fit an observation.

        Args:
            value: The observation.
            count: Number of times the observation occurred (default 1).
                A count of 0 is a no-op.

        Raises:
            ValueError: If count is negative or the value is invalid for
                this statistic.
            TypeError: If count is not an integer.
        """
        count = check_count(count)
        self._check(value)
        if count == 0:
            return
        self._fit(value, count)

    def fit_many(self, values: Iterable[TObs]) -> None:
        """Fit each value once, in order.

        Raises:
            ValueError: If any value is invalid. Nothing is fitted in that case.
        """
        values = list(values)
        for value in values:
            self._check(value)
        if values:
            self._fit_batch(values)

    def fit_counts(self, pairs: Iterable[tuple[TObs, int]] | Mapping[TObs, int]) -> None:
        """Fit (value, count) pairs.

        Args:
            pairs: An iterable of (value, count) pairs, or a mapping from
                value to count such as a collections.Counter.

        Raises:
            ValueError: If any value or count is invalid. Nothing is fitted
                in that case.
        """
        if isinstance(pairs, Mapping):
            pairs = pairs.items()

        checked = []
        for value, count in pairs:
            count = check_count(count)
            self._check(value)
            checked.append((value, count))

        for value, count in checked:
            if count:
                self._fit(value, count)

    def merge(self, other: Self) -> None:
        """Merge another statistic of the same kind into this one.

        After merging, this statistic reflects the observations of both, as
        if they had all been fitted here. `other` is not modified.

        Raises:
            TypeError: If other is not the same kind of statistic.
            ConfigurationMismatchError: If other was configured differently.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Can only merge {type(self).__name__} with {type(self).__name__}, "
                f"got {type(other).__name__}"
            )
        if other is self:
            other = other.clone()
        self._merge(other)

    def unsafe_merge(self, other: object) -> None:
        """Merge a statistic whose concrete kind is only known at runtime.

        Useful for heterogeneous collections of statistics held as
        RunningStatistic.

        Raises:
            TypeError: If other is not a statistic of the same kind.
        """
        if not isinstance(other, RunningStatistic):
            raise TypeError(
                f"Can only merge running statistics, got {type(other).__name__}"
            )
        self.merge(other)

    @abstractmethod
    def reset(self) -> None:
        """Return to the state of a freshly constructed instance.

        Configuration (edges, tolerance, batch size, ...) is kept.
        """

    @abstractmethod
    def clone_empty(self) -> Self:
        """Create a new statistic with the same configuration and no observations."""

    def clone(self) -> Self:
        """Create a deep, independent copy."""
        new = self.clone_empty()
        new._merge(self)
        return new

    def __copy__(self) -> Self:
        return self.clone()

    def __deepcopy__(self, memo: dict) -> Self:
        return self.clone()

    def _check(self, value: TObs) -> None:
        """Raise if value cannot be fitted. Accepts everything by default."""

    @abstractmethod
    def _fit(self, value: TObs, count: int) -> None:
        """Apply a validated observation with a positive count."""

    def _fit_batch(self, values: list[TObs]) -> None:
        """Apply a non-empty list of validated observations, each with count 1."""
        for value in values:
            self._fit(value, 1)

    @abstractmethod
    def _merge(self, other: Self) -> None:
        """Merge a statistic already known to be of the same type."""


def merge[S: RunningStatistic](source: S, *others: S) -> S:
    """Merge statistics into a new instance, leaving all arguments untouched.

    With only `source`, this is equivalent to `source.clone()`.

    Args:
        source: The statistic the result starts from.
        *others: Further statistics of the same kind to merge in.

    Returns:
        A new statistic holding the combined observations.

    Example:
        total = merge(shard_a, shard_b, shard_c)
    """
    result = source.clone()
    for other in others:
        result.merge(other)
    return result
