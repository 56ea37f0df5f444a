"""
Shared pytest fixtures for runningstats tests.
"""

import logging
import random

import pytest


@pytest.fixture
def rng() -> random.Random:
    """A seeded random generator, so sampled data is the same on every run."""
    return random.Random(42)


@pytest.fixture
def normal_sample(rng) -> list[float]:
    """2,000 draws from N(10, 3^2)."""
    return [rng.gauss(10.0, 3.0) for _ in range(2_000)]


@pytest.fixture
def skewed_sample(rng) -> list[float]:
    """2,000 draws from an exponential distribution with rate 0.5."""
    return [rng.expovariate(0.5) for _ in range(2_000)]


@pytest.fixture(autouse=True)
def reset_runningstats_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)

    This prevents logging configuration from one test affecting another.
    """
    logger = logging.getLogger("runningstats")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
