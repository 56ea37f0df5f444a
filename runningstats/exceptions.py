"""Exception types raised by running statistics.

Plain input problems (NaN values, negative counts, probabilities outside
[0, 1]) raise the built-in ValueError, and merging two different kinds of
statistic raises TypeError. The classes here cover the cases a caller is
expected to tell apart from those.
"""

__all__ = [
    "ConfigurationMismatchError",
    "ConvergenceError",
    "InsufficientDataError",
]


class ConfigurationMismatchError(ValueError):
    """Two statistics of the same kind were built with incompatible settings.

    Raised by merge() when, for example, two histograms have different bins
    or two empirical CDFs have different batch sizes.
    """


class InsufficientDataError(RuntimeError):
    """A query needs more observations than the statistic has seen."""


class ConvergenceError(ArithmeticError):
    """A numerical method failed to converge or had no valid bracket."""
