"""runningstats - single-pass, mergeable summary statistics.

Statistics consume observations one at a time (optionally with repeat
counts) in bounded memory, answer queries from their sufficient statistics,
and merge with other statistics of the same kind.

The library is silent by default; see runningstats.logging_config to turn
on log output.
"""

import logging

from runningstats.exceptions import (
    ConfigurationMismatchError,
    ConvergenceError,
    InsufficientDataError,
)
from runningstats.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from runningstats.statistics import (
    DEFAULT_FLOAT_TOLERANCE,
    DEFAULT_NUM_BINS,
    Beta,
    EmpiricalCdf,
    Extrema,
    GenericExtrema,
    Histogram,
    HistogramBin,
    Mean,
    Moments,
    Normal,
    OutOfBounds,
    RunningStatistic,
    Sum,
    Variance,
    merge,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Statistics
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
    "DEFAULT_FLOAT_TOLERANCE",
    "DEFAULT_NUM_BINS",
    # Errors
    "ConfigurationMismatchError",
    "ConvergenceError",
    "InsufficientDataError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]
