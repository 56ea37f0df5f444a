"""Histogram over a fixed set of bin edges.

Bins are built once from a sorted, de-duplicated list of edges and never
resized. Together with two out-of-bounds counters (below the first edge,
above the last edge) they partition the whole real line, so every fitted
value lands in exactly one place:

    sum(bin.count for bin in hist) + lower + upper == hist.nobs

Closure rules, for edges [a, b, c, d]:

    left_closed=True,  ends_closed=True:   [a, b), [b, c), [c, d]
    left_closed=True,  ends_closed=False:  [a, b), [b, c), [c, d)
    left_closed=False, ends_closed=True:   [a, b], (b, c], (c, d]
    left_closed=False, ends_closed=False:  (a, b], (b, c], (c, d]
"""

from __future__ import annotations

import bisect
import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, Self

import pandas as pd

from runningstats.exceptions import ConfigurationMismatchError
from runningstats.statistics.base import RunningStatistic

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HistogramBin:
    """An interval of the real line and the number of observations in it.

    The interval is fixed at construction; only `count` changes.

    Attributes:
        lower: Lower bound (may be -inf).
        upper: Upper bound (may be +inf).
        closed_left: Whether `lower` belongs to the bin.
        closed_right: Whether `upper` belongs to the bin.
        count: Observations in the bin.
    """

    lower: float
    upper: float
    closed_left: bool
    closed_right: bool
    count: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if not self.lower < self.upper:
            raise ValueError(
                f"lower bound must be strictly less than upper bound, "
                f"got lower={self.lower}, upper={self.upper}"
            )
        if math.isinf(self.lower) and math.isinf(self.upper):
            raise ValueError("bin bounds cannot both be infinite")

    @property
    def midpoint(self) -> float:
        """Centre of the bin, or the infinite bound for an unbounded bin."""
        if math.isinf(self.lower):
            return self.lower
        if math.isinf(self.upper):
            return self.upper
        return self.lower + (self.upper - self.lower) / 2

    @property
    def name(self) -> str:
        """Interval notation, e.g. "[0, 10)"."""
        left = "[" if self.closed_left else "("
        right = "]" if self.closed_right else ")"
        return f"{left}{self.lower:g}, {self.upper:g}{right}"

    def contains(self, value: float) -> bool:
        if self.lower < value < self.upper:
            return True
        if value == self.lower:
            return self.closed_left
        if value == self.upper:
            return self.closed_right
        return False

    def __repr__(self) -> str:
        return f"HistogramBin({self.name}, count={self.count})"


class OutOfBounds(NamedTuple):
    """Counts of observations below the first and above the last bin."""

    lower: int
    upper: int


class Histogram(RunningStatistic[float]):
    """Counts observations falling into bins defined by edges.

    Fitting is O(log n) in the number of bins. NaN is rejected; infinite
    values are accepted and land in an unbounded bin or out of bounds.

    Merging histograms with identical bins is exact. Histograms with
    different bins can only be combined approximately, by re-fitting each of
    the other histogram's bins at its midpoint with that bin's count; this
    must be requested with merge(other, approximate=True).

    Args:
        edges: At least two distinct bin edges, in any order.
        left_closed: Bins are [a, b) if True, (a, b] if False.
        ends_closed: Whether the outermost bin is also closed on its outer end.

    Example:
        hist = Histogram([-math.inf, 0, 10, 100])
        hist.fit_many([-1, 1, 20, 1000])
        hist.counts         # [1, 1, 1]
        hist.out_of_bounds  # OutOfBounds(lower=0, upper=1)
    """

    def __init__(
        self,
        edges: Iterable[float],
        left_closed: bool = True,
        ends_closed: bool = True,
    ):
        unique_edges = sorted(set(edges))
        if any(math.isnan(edge) for edge in unique_edges):
            raise ValueError("edges must not contain NaN")
        if len(unique_edges) < 2:
            raise ValueError(f"need at least two distinct edges, got {unique_edges}")

        self._edges = tuple(unique_edges)
        self._left_closed = left_closed
        self._ends_closed = ends_closed
        self._bins = self._build_bins()
        self._lower_count = 0
        self._upper_count = 0
        self._nobs = 0

    def _build_bins(self) -> list[HistogramBin]:
        edges = self._edges
        last = len(edges) - 2
        bins = []
        for i, (lower, upper) in enumerate(zip(edges, edges[1:])):
            if self._left_closed:
                closed_left, closed_right = True, i == last and self._ends_closed
            else:
                closed_left, closed_right = i == 0 and self._ends_closed, True
            bins.append(HistogramBin(lower, upper, closed_left, closed_right))
        return bins

    @property
    def nobs(self) -> int:
        return self._nobs

    @property
    def edges(self) -> tuple[float, ...]:
        return self._edges

    @property
    def left_closed(self) -> bool:
        return self._left_closed

    @property
    def ends_closed(self) -> bool:
        return self._ends_closed

    @property
    def bins(self) -> tuple[HistogramBin, ...]:
        """The bins, lowest first. Treat as read-only."""
        return tuple(self._bins)

    @property
    def counts(self) -> list[int]:
        return [b.count for b in self._bins]

    @property
    def out_of_bounds(self) -> OutOfBounds:
        return OutOfBounds(self._lower_count, self._upper_count)

    def __iter__(self) -> Iterator[HistogramBin]:
        return iter(self._bins)

    def __len__(self) -> int:
        return len(self._bins)

    def find_bin(self, value: float) -> HistogramBin | None:
        """Return the bin containing value, or None if it is out of bounds."""
        index = self._locate(value)
        return None if index is None else self._bins[index]

    def _locate(self, value: float) -> int | None:
        first, last = self._bins[0], self._bins[-1]

        if value < first.lower or value > last.upper:
            return None
        if value == last.upper:
            return len(self._bins) - 1 if last.closed_right else None
        if value == first.lower:
            return 0 if first.closed_left else None

        # Strictly inside (first.lower, last.upper)
        if self._left_closed:
            return bisect.bisect_right(self._edges, value) - 1
        return bisect.bisect_left(self._edges, value) - 1

    def _check(self, value: float) -> None:
        if math.isnan(value):
            raise ValueError("value must not be NaN")

    def _fit(self, value: float, count: int) -> None:
        index = self._locate(value)
        if index is not None:
            self._bins[index].count += count
        elif value < self._edges[-1]:
            self._lower_count += count
        else:
            self._upper_count += count
        self._nobs += count

    def matches(self, other: Histogram) -> bool:
        """Whether other has exactly the same bins (bounds and closure)."""
        return self._bins == other._bins

    def merge(self, other: Self, approximate: bool = False) -> None:
        """Merge another histogram into this one.

        Args:
            other: The histogram to merge. It is not modified.
            approximate: If the bins differ, re-fit each of other's bins at
                its midpoint instead of raising. This is lossy.

        Raises:
            TypeError: If other is not a Histogram.
            ConfigurationMismatchError: If the bins differ and approximate
                is False.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Can only merge Histogram with Histogram, got {type(other).__name__}"
            )
        if other is self:
            other = other.clone()
        if self.matches(other):
            self._merge(other)
        elif approximate:
            self._merge_midpoints(other)
        else:
            raise ConfigurationMismatchError(
                f"histogram bins differ: {[b.name for b in self._bins]} vs "
                f"{[b.name for b in other._bins]}; use approximate=True to "
                f"merge by bin midpoints"
            )

    def _merge(self, other: Histogram) -> None:
        for mine, theirs in zip(self._bins, other._bins, strict=True):
            mine.count += theirs.count
        self._lower_count += other._lower_count
        self._upper_count += other._upper_count
        self._nobs += other._nobs

    def _merge_midpoints(self, other: Histogram) -> None:
        logger.debug(
            "Approximate histogram merge: %d source bins re-fitted at midpoints",
            len(other._bins),
        )
        for b in other._bins:
            if b.count:
                self._fit(b.midpoint, b.count)
        self._lower_count += other._lower_count
        self._upper_count += other._upper_count
        self._nobs += other._lower_count + other._upper_count

    def reset(self) -> None:
        for b in self._bins:
            b.count = 0
        self._lower_count = 0
        self._upper_count = 0
        self._nobs = 0

    def clone_empty(self) -> Self:
        return type(self)(self._edges, self._left_closed, self._ends_closed)

    def to_frame(self) -> pd.DataFrame:
        """Bins as a DataFrame with one row per bin.

        Columns: bin, lower, upper, closed_left, closed_right, count.
        """
        return pd.DataFrame(
            {
                "bin": [b.name for b in self._bins],
                "lower": [b.lower for b in self._bins],
                "upper": [b.upper for b in self._bins],
                "closed_left": [b.closed_left for b in self._bins],
                "closed_right": [b.closed_right for b in self._bins],
                "count": [b.count for b in self._bins],
            }
        )

    def __repr__(self) -> str:
        return (
            f"Histogram(nobs={self._nobs}, bins={len(self._bins)}, "
            f"out_of_bounds=({self._lower_count}, {self._upper_count}))"
        )
