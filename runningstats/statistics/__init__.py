"""Mergeable running statistics.

Every statistic here processes a stream in a single pass with bounded
memory and can absorb another statistic of the same kind, so partial
results from separate workers or partitions can be combined:

    shards = [Variance() for _ in range(4)]
    for shard, chunk in zip(shards, chunks):
        shard.fit_many(chunk)
    total = merge(*shards)

Quick Reference:
    Sum: Weighted running sum
    Mean: Running mean
    Variance: Running mean and sample variance (Welford)
    Moments: Mean, variance, skewness and excess kurtosis
    Extrema / GenericExtrema: Min and max with tie counts
    Histogram: Counts per bin for fixed edges
    EmpiricalCdf: Approximate quantiles and CDF in fixed memory
    Beta: Beta-Bernoulli success/failure counts with pdf/cdf/quantile
    Normal: Normal distribution fitted from mean and variance
"""

from runningstats.statistics.base import RunningStatistic, merge
from runningstats.statistics.beta import Beta
from runningstats.statistics.empirical_cdf import DEFAULT_NUM_BINS, EmpiricalCdf
from runningstats.statistics.extrema import DEFAULT_FLOAT_TOLERANCE, Extrema, GenericExtrema
from runningstats.statistics.histogram import Histogram, HistogramBin, OutOfBounds
from runningstats.statistics.mean import Mean
from runningstats.statistics.moments import Moments
from runningstats.statistics.normal import Normal
from runningstats.statistics.sum import Sum
from runningstats.statistics.variance import Variance

__all__ = [
    "DEFAULT_FLOAT_TOLERANCE",
    "DEFAULT_NUM_BINS",
    "Beta",
    "EmpiricalCdf",
    "Extrema",
    "GenericExtrema",
    "Histogram",
    "HistogramBin",
    "Mean",
    "Moments",
    "Normal",
    "OutOfBounds",
    "RunningStatistic",
    "Sum",
    "Variance",
    "merge",
]
