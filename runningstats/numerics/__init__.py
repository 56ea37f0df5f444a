"""Numerical methods backing the distribution-style statistics.

Pure Python implementations of:
- Root finding (Brent's method)
- Log-gamma, the regularized incomplete beta function and the error function
"""

from runningstats.numerics.root_finding import RootResult, brentq, find_root
from runningstats.numerics.special import (
    MAX_CONTINUED_FRACTION_ITERATIONS,
    beta_regularized,
    erf,
    erfc,
    log_beta,
    log_gamma,
)

__all__ = [
    "MAX_CONTINUED_FRACTION_ITERATIONS",
    "RootResult",
    "beta_regularized",
    "brentq",
    "erf",
    "erfc",
    "find_root",
    "log_beta",
    "log_gamma",
]
