"""
Random variates for the synthetic data pipeline.

Purpose
-------
Draws i.i.d. samples from a configured `DistributionConfig` using an
explicitly passed `numpy.random.Generator`. The generator is never a
module global: every caller threads the same instance through in a fixed
order, so a seed reproduces a run exactly.

Positive filtering
------------------
Shop sizes and prices must be strictly positive, while a normal
distribution can produce any real. `draw_positive` discards non-positive
draws and draws again, consuming exactly as many samples from the stream
as a one-at-a-time filter would: each refill requests only the number of
values still missing, so the stream is never over-drawn.

Example
-------
>>> rng = np.random.default_rng(42)
>>> prices = draw_positive(rng, DistributionConfig(mean=50, std_dev=20), 5, name="price")
>>> (prices > 0).all()
True
"""

from __future__ import annotations

import numpy as np

from .config import DistributionConfig
from .constants import DAYS_IN_YEAR, DEFAULT_MAX_RESAMPLE_ATTEMPTS
from .exceptions import ConfigurationError

__all__ = [
    "draw",
    "draw_positive",
    "draw_days",
]


def draw(rng: np.random.Generator, distribution: DistributionConfig, size: int) -> np.ndarray:
    """Draw *size* raw samples from *distribution* (may be non-positive)."""
    if distribution.kind == "lognormal":
        return rng.lognormal(distribution.mean, distribution.std_dev, size=size)
    return rng.normal(distribution.mean, distribution.std_dev, size=size)


def draw_positive(
    rng: np.random.Generator,
    distribution: DistributionConfig,
    size: int,
    *,
    name: str = "distribution",
    max_attempts: int = DEFAULT_MAX_RESAMPLE_ATTEMPTS,
) -> np.ndarray:
    """
    Draw *size* strictly positive samples, resampling rejected draws.

    Parameters
    ----------
    rng : np.random.Generator
        Shared random stream.
    distribution : DistributionConfig
        Source distribution.
    size : int
        Number of positive samples required.
    name : str
        Label used in error messages.
    max_attempts : int
        Rejected draws tolerated per requested sample.

    Returns
    -------
    np.ndarray, shape (size,)
        Positive samples in stream order.

    Raises
    ------
    ConfigurationError
        If more than ``max_attempts * size`` draws are rejected.
    """
    if size <= 0:
        return np.empty(0, dtype=float)

    budget = max_attempts * size
    rejected = 0
    accepted = []
    missing = size
    while missing > 0:
        batch = draw(rng, distribution, missing)
        positive = batch[batch > 0]
        accepted.append(positive)
        missing -= positive.size
        rejected += batch.size - positive.size
        if rejected > budget:
            raise ConfigurationError(
                f"{name} produced no usable positive sample: {rejected} of "
                f"{rejected + size - missing} draws were non-positive "
                f"(mean={distribution.mean}, std_dev={distribution.std_dev}). "
                f"Check the distribution parameters."
            )
    return np.concatenate(accepted)


def draw_days(rng: np.random.Generator, size: int) -> np.ndarray:
    """Draw *size* day-of-year indices uniformly in [0, 365), with replacement."""
    return rng.integers(0, DAYS_IN_YEAR, size=size)
