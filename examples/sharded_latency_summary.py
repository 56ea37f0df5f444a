"""Summarise request latencies computed on separate worker processes.

Demonstrates the merge workflow:
1. Each worker fits its own statistics over its shard of the stream
2. The partial statistics are sent back to the parent (they pickle like
   any plain object)
3. The parent merges them into one summary without seeing a single
   raw observation

Latencies are drawn from a log-normal distribution, so the summary shows a
right-skewed shape with a long tail.
"""

from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import runningstats
from runningstats import Beta, EmpiricalCdf, Extrema, Histogram, Moments, merge

LATENCY_EDGES_MS = [0, 5, 10, 20, 50, 100, 200, 500, 1000]


# =============================================================================
# Per-shard statistics
# =============================================================================


@dataclass
class LatencySummary:
    """The statistics each worker maintains for its shard."""

    moments: Moments
    extrema: Extrema
    histogram: Histogram
    quantiles: EmpiricalCdf
    slo: Beta

    @classmethod
    def empty(cls) -> LatencySummary:
        return cls(
            moments=Moments(),
            extrema=Extrema(),
            histogram=Histogram(LATENCY_EDGES_MS),
            quantiles=EmpiricalCdf(num_bins=100),
            slo=Beta(),
        )

    def fit(self, latency_ms: float, slo_ms: float) -> None:
        self.moments.fit(latency_ms)
        self.extrema.fit(latency_ms)
        self.histogram.fit(latency_ms)
        self.quantiles.fit(latency_ms)
        self.slo.fit(latency_ms <= slo_ms)

    def merge(self, other: LatencySummary) -> None:
        self.moments.merge(other.moments)
        self.extrema.merge(other.extrema)
        self.histogram.merge(other.histogram)
        self.quantiles.merge(other.quantiles)
        self.slo.merge(other.slo)


def summarise_shard(seed: int, requests: int, slo_ms: float) -> LatencySummary:
    """Worker entry point: generate and fit one shard of latencies."""
    rng = random.Random(seed)
    summary = LatencySummary.empty()
    for _ in range(requests):
        summary.fit(rng.lognormvariate(3.0, 0.8), slo_ms)
    return summary


# =============================================================================
# Reporting
# =============================================================================


def print_summary(summary: LatencySummary, slo_ms: float) -> None:
    moments, extrema, ecdf, slo = (
        summary.moments,
        summary.extrema,
        summary.quantiles,
        summary.slo,
    )

    print("\n" + "=" * 70)
    print("LATENCY SUMMARY")
    print("=" * 70)
    print(f"  Requests:        {moments.nobs:,}")
    print(f"  Mean:            {moments.mean:8.2f} ms")
    print(f"  Std dev:         {moments.std:8.2f} ms")
    print(f"  Skewness:        {moments.skewness:8.2f}")
    print(f"  Excess kurtosis: {moments.kurtosis:8.2f}")
    print(f"  Min / Max:       {extrema.min:.2f} / {extrema.max:.2f} ms")
    for p in (50, 90, 99, 99.9):
        print(f"  p{p:<5}           {ecdf.percentile(p):8.2f} ms")

    low, high = slo.quantile(0.025), slo.quantile(0.975)
    print(f"\n  Within {slo_ms:g} ms SLO: {slo.mean:.4%} (95% interval {low:.4%} - {high:.4%})")

    print("\n  Histogram:")
    for b in summary.histogram:
        print(f"    {b.name:>12}  {b.count:>8,}")
    below, above = summary.histogram.out_of_bounds
    print(f"    {'out of range':>12}  {below + above:>8,}")
    print("=" * 70)


# =============================================================================
# Entry Point
# =============================================================================


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Merge latency statistics from worker shards")
    parser.add_argument("--workers", type=int, default=4, help="Number of worker processes")
    parser.add_argument("--requests", type=int, default=50_000, help="Requests per worker")
    parser.add_argument("--slo", type=float, default=100.0, help="Latency SLO (ms)")
    parser.add_argument("--seed", type=int, default=42, help="Base random seed")
    parser.add_argument("--csv", type=str, default=None, help="Write the histogram to this CSV")
    parser.add_argument("--verbose", action="store_true", help="Show library debug logging")
    args = parser.parse_args()

    if args.verbose:
        runningstats.enable_console_logging(level="DEBUG")
    else:
        runningstats.configure_from_env()

    print(f"Fitting {args.workers} x {args.requests:,} requests...")

    with ProcessPoolExecutor(max_workers=args.workers) as pool:
        shards = list(
            pool.map(
                summarise_shard,
                [args.seed + i for i in range(args.workers)],
                [args.requests] * args.workers,
                [args.slo] * args.workers,
            )
        )

    total = LatencySummary.empty()
    for shard in shards:
        total.merge(shard)

    # The free merge() leaves its inputs untouched
    assert merge(*(s.moments for s in shards)).nobs == total.moments.nobs

    print_summary(total, args.slo)

    if args.csv:
        path = Path(args.csv)
        path.parent.mkdir(parents=True, exist_ok=True)
        total.histogram.to_frame().to_csv(path, index=False)
        print(f"\nHistogram written to: {path.absolute()}")
