"""Approximate quantiles from batched order statistics.

Observations are collected into a buffer of `num_bins` values. Each time the
buffer fills it is sorted, and its order statistics are blended into a
running estimate with weight equal to the batch's share of all observations
so far:

    values[k] = smooth(values[k], sorted_batch[k], num_bins / nobs)

For an i.i.d. stream this converges to the expected order statistics of a
sample of size `num_bins`. Memory is O(num_bins) regardless of stream length.

Quantiles are read off the array [min, values[0], ..., values[B-1], max],
treated as B + 2 equally spaced order statistics and linearly interpolated.
The exact min and max are tracked separately.

Merging blends the two estimate arrays with weight n_other / n_total. Only
the estimates and the extremes are combined: observations still waiting in
the other estimator's buffer count towards nobs, min and max but are never
folded into the receiver's estimates.
"""

from __future__ import annotations

import bisect
import logging
import math
from typing import Self

from runningstats.exceptions import ConfigurationMismatchError, InsufficientDataError
from runningstats.statistics.base import RunningStatistic, check_finite, smooth
from runningstats.statistics.extrema import Extrema

logger = logging.getLogger(__name__)

DEFAULT_NUM_BINS = 200


class EmpiricalCdf(RunningStatistic[float]):
    """Fixed-memory approximate quantile and CDF estimator.

    Quantile and CDF queries need at least one full batch (`num_bins`
    observations) and raise InsufficientDataError before that.

    Args:
        num_bins: Batch size and number of interior order statistics kept.
            Larger values give finer quantiles at the cost of memory and a
            longer warm-up. Must be at least 2.

    Example:
        ecdf = EmpiricalCdf(num_bins=100)
        ecdf.fit_many(latencies)
        p99 = ecdf.quantile(0.99)
    """

    def __init__(self, num_bins: int = DEFAULT_NUM_BINS):
        if num_bins < 2:
            raise ValueError(f"num_bins must be at least 2, got {num_bins}")

        self._num_bins = num_bins
        self._extrema = Extrema()
        self._buffer: list[float] = []
        self._values = [0.0] * num_bins
        self._batched = 0

    @property
    def num_bins(self) -> int:
        return self._num_bins

    @property
    def nobs(self) -> int:
        return self._extrema.nobs

    @property
    def min(self) -> float:
        """Exact minimum. Raises InsufficientDataError when empty."""
        return self._extrema.min

    @property
    def max(self) -> float:
        """Exact maximum. Raises InsufficientDataError when empty."""
        return self._extrema.max

    @property
    def median(self) -> float:
        return self.quantile(0.5)

    def _check(self, value: float) -> None:
        check_finite(value)

    def _fit(self, value: float, count: int) -> None:
        for _ in range(count):
            self._extrema.fit(value)
            self._buffer.append(value)
            if len(self._buffer) == self._num_bins:
                self._flush()

    def _flush(self) -> None:
        """Fold a full buffer into the order-statistic estimates."""
        self._buffer.sort()
        # The first batch is copied as is, later ones weigh by their share of nobs
        weight = self._num_bins / self.nobs if self._batched else 1.0
        self._values = [
            smooth(current, new, weight)
            for current, new in zip(self._values, self._buffer, strict=True)
        ]
        self._batched += self._num_bins
        self._buffer.clear()
        logger.debug("EmpiricalCdf folded batch, %d observations batched", self._batched)

    def _merge(self, other: EmpiricalCdf) -> None:
        if other._num_bins != self._num_bins:
            raise ConfigurationMismatchError(
                f"EmpiricalCdf batch sizes differ: {self._num_bins} vs {other._num_bins}"
            )
        if other.nobs == 0:
            return

        if self.nobs == 0:
            self._extrema.merge(other._extrema)
            self._buffer = list(other._buffer)
            self._values = list(other._values)
            self._batched = other._batched
            return

        weight = other.nobs / (self.nobs + other.nobs)
        self._extrema.merge(other._extrema)

        if not other._batched:
            return
        if not self._batched:
            self._values = list(other._values)
        else:
            self._values = [
                smooth(mine, theirs, weight)
                for mine, theirs in zip(self._values, other._values, strict=True)
            ]
        self._batched += other._batched

    def _require_batch(self) -> None:
        if self.nobs < self._num_bins:
            raise InsufficientDataError(
                f"EmpiricalCdf needs at least {self._num_bins} observations, has {self.nobs}"
            )
        if not self._batched:
            raise InsufficientDataError(
                f"EmpiricalCdf has {self.nobs} observations but no full batch of {self._num_bins}"
            )

    def _order_statistics(self) -> list[float]:
        return [self._extrema.min, *self._values, self._extrema.max]

    def quantile(self, p: float) -> float:
        """Estimate the value at quantile p.

        quantile(0) is the exact minimum and quantile(1) the exact maximum.

        Raises:
            ValueError: If p is not in [0, 1].
            InsufficientDataError: Before the first full batch.
        """
        if not 0 <= p <= 1:
            raise ValueError(f"Quantile must be in [0, 1], got {p}")
        self._require_batch()

        points = self._order_statistics()
        position = (len(points) - 1) * p
        i = math.floor(position)
        if i >= len(points) - 1:
            return points[-1]
        return smooth(points[i], points[i + 1], position - i)

    def percentile(self, p: float) -> float:
        """Estimate the value at percentile p (0 to 100)."""
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.quantile(p / 100.0)

    def cdf(self, x: float) -> float:
        """Estimate the probability that an observation is <= x.

        Locates x among the B + 2 order statistics and divides its
        interpolated rank by B + 2, so just below max the estimate is
        (B + 1) / (B + 2) and it reaches 1 at max itself.

        Raises:
            InsufficientDataError: Before the first full batch.
        """
        self._require_batch()

        points = self._order_statistics()
        if x < points[0]:
            return 0.0
        if x >= points[-1]:
            return 1.0

        i = bisect.bisect_right(points, x) - 1
        lower, upper = points[i], points[i + 1]
        rank = i + (x - lower) / (upper - lower)
        return rank / len(points)

    def reset(self) -> None:
        self._extrema.reset()
        self._buffer.clear()
        self._values = [0.0] * self._num_bins
        self._batched = 0

    def clone_empty(self) -> Self:
        return type(self)(self._num_bins)

    def __repr__(self) -> str:
        return f"EmpiricalCdf(nobs={self.nobs}, num_bins={self._num_bins})"
