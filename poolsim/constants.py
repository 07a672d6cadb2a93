"""
Global constants for poolsim.

Purpose
-------
Centralizes calendar sizes and default values used throughout the
poolsim codebase.

Usage
-----
>>> from poolsim.constants import HOURS_IN_DAY, DAYS_IN_YEAR
>>> hourly = np.zeros(HOURS_IN_DAY, dtype=np.int64)

Categories
----------
- Calendar: hours per day, days per year
- Sampling: resampling bounds
- Plotting: figure sizes
"""

from typing import Tuple

__all__ = [
    # Calendar
    "HOURS_IN_DAY",
    "DAYS_IN_YEAR",
    # Sampling
    "DEFAULT_MAX_RESAMPLE_ATTEMPTS",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_LINEWIDTH",
]


# =============================================================================
# Calendar
# =============================================================================

HOURS_IN_DAY: int = 24
"""Number of hourly transaction batches per simulated day."""

DAYS_IN_YEAR: int = 365
"""Number of simulated days per year (no leap years)."""


# =============================================================================
# Sampling Defaults
# =============================================================================

DEFAULT_MAX_RESAMPLE_ATTEMPTS: int = 1000
"""Rejected draws allowed per requested positive sample before giving up."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (12, 8)
"""Default figure size for history plots."""

DEFAULT_LINEWIDTH: float = 1.5
"""Standard line width for plots."""
