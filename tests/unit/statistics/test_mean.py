"""Unit tests for Mean."""

import math

import numpy as np
import pytest

from runningstats import Mean, merge


class TestMean:
    """Tests for the running mean."""

    def test_empty_is_nan(self):
        """An empty mean is undefined, never zero."""
        assert math.isnan(Mean().value)

    def test_one_to_thousand(self):
        mean = Mean()
        for x in range(1, 1001):
            mean.fit(x)
        assert mean.value == 500.5

    def test_batch_fit(self):
        mean = Mean()
        mean.fit_many(range(1, 1001))
        assert mean.value == 500.5
        assert mean.nobs == 1000

    def test_weighted_observation(self):
        """fit(x, count=k) weighs x k times."""
        mean = Mean()
        mean.fit(10.0, count=3)
        mean.fit(2.0)
        assert mean.value == pytest.approx(8.0)

    def test_matches_numpy(self, normal_sample):
        mean = Mean()
        mean.fit_many(normal_sample)
        assert mean.value == pytest.approx(np.mean(normal_sample), rel=1e-12)

    def test_stable_with_large_offset(self, rng):
        """No catastrophic cancellation when values share a huge offset."""
        values = [1e12 + rng.random() for _ in range(10_000)]
        mean = Mean()
        for v in values:
            mean.fit(v)
        assert mean.value == pytest.approx(math.fsum(values) / len(values), rel=1e-13)

    def test_sharded_merge_matches_single_pass(self, normal_sample):
        shards = [Mean() for _ in range(4)]
        for i, value in enumerate(normal_sample):
            shards[i % 4].fit(value)

        total = merge(*shards)

        assert total.nobs == len(normal_sample)
        assert total.value == pytest.approx(np.mean(normal_sample), rel=1e-12)

    def test_float_conversion(self):
        mean = Mean()
        mean.fit_many([1.0, 2.0])
        assert float(mean) == 1.5

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value):
        mean = Mean()
        with pytest.raises(ValueError, match="finite"):
            mean.fit(value)
        assert mean.nobs == 0

    def test_reset_returns_nan(self):
        mean = Mean()
        mean.fit(3.0)
        mean.reset()
        assert math.isnan(mean.value)
        assert mean.nobs == 0
