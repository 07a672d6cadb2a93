"""
Configuration management module for poolsim.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter management,
validation, and serialization. Supports environment variables and JSON configs.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for config files
- Environment-aware: Supports .env files for application settings

Example
-------
>>> from poolsim.config import SimConfig, DistributionConfig
>>> config = SimConfig(
...     simulated_shops_number=100,
...     simulated_years_number=1,
...     shop_size_distribution=DistributionConfig(mean=1.0, std_dev=0.5),
...     sales_per_year_for_each_shop=3,
...     sale_multiplier=4,
...     default_daily_multipliers="1",
...     default_daily_distribution="where((h >= 8) & (h < 22), 2, 0)",
...     price_distribution=DistributionConfig(mean=50.0, std_dev=20.0),
...     withdrawal_period_in_days=7,
... )
>>> config.daily_multipliers().shape
(365,)
>>>
>>> # Serialize to dict/JSON
>>> json_str = config.model_dump_json()
>>> loaded = SimConfig.model_validate_json(json_str)
"""

from __future__ import annotations
from typing import List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DAYS_IN_YEAR, DEFAULT_MAX_RESAMPLE_ATTEMPTS, HOURS_IN_DAY
from .exceptions import ConfigurationError
from .utils import build_table

__all__ = [
    "DistributionConfig",
    "SimConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------

class DistributionConfig(BaseModel):
    """
    Continuous probability distribution used for shop sizes and prices.

    Attributes
    ----------
    kind : {"normal", "lognormal"}
        Distribution family. For "lognormal", `mean` and `std_dev` are the
        parameters of the underlying normal.
    mean : float
        Location parameter.
    std_dev : float
        Scale parameter (non-negative).

    Examples
    --------
    >>> price = DistributionConfig(mean=50.0, std_dev=20.0)
    >>> price.kind
    'normal'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["normal", "lognormal"] = Field(
        default="normal",
        description="Distribution family"
    )
    mean: float = Field(
        allow_inf_nan=False,
        description="Location parameter"
    )
    std_dev: float = Field(
        ge=0,
        allow_inf_nan=False,
        description="Scale parameter"
    )

    @field_validator("std_dev")
    @classmethod
    def validate_std_dev(cls, v, info):
        """Reject a constant normal distribution that is never positive."""
        kind = info.data.get("kind", "normal")
        mean = info.data.get("mean")
        if kind == "normal" and v == 0 and mean is not None and mean <= 0:
            raise ValueError(
                f"std_dev=0 with mean={mean} never produces a positive sample"
            )
        return v


# ---------------------------------------------------------------------------
# Simulation Configuration
# ---------------------------------------------------------------------------

class SimConfig(BaseModel):
    """
    Configuration of one pooling-strategy comparison run.

    Attributes
    ----------
    simulated_shops_number : int
        Number of shops in the simulation.
    simulated_years_number : int
        Number of simulated years (365 days each).
    shop_size_distribution : DistributionConfig
        Distribution of a shop's size. The hourly order table of a shop is
        the default hourly table multiplied by its size.
    sales_per_year_for_each_shop : int
        Number of sale days each shop runs per year.
    sale_multiplier : int
        On a sale day the daily multiplier is multiplied by this value.
    default_daily_multipliers : str or list of int
        Multiplier applied to the hourly table for each day of the year.
        Either an expression of the day number `d` or 365 explicit values.
    default_daily_distribution : str or list of int
        Base number of orders for each hour of the day. Either an
        expression of the hour `h` or 24 explicit values.
    price_distribution : DistributionConfig
        Distribution from which each transaction amount is drawn.
    withdrawal_period_in_days : int
        Money is withdrawn every this many days (day 0 of each year included).
    max_resample_attempts : int
        Rejected (non-positive) draws allowed per requested sample before
        the distribution is considered misconfigured.

    Examples
    --------
    >>> config.daily_distribution()[:3]
    array([0, 0, 0])
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    simulated_shops_number: int = Field(
        ge=1,
        description="Number of shops"
    )
    simulated_years_number: int = Field(
        ge=1,
        description="Number of simulated years"
    )
    shop_size_distribution: DistributionConfig = Field(
        description="Shop size distribution"
    )
    sales_per_year_for_each_shop: int = Field(
        default=0,
        ge=0,
        le=DAYS_IN_YEAR * 10,
        description="Sale days per shop per year"
    )
    sale_multiplier: int = Field(
        default=1,
        ge=1,
        description="Daily multiplier factor on sale days"
    )
    default_daily_multipliers: Union[str, List[int]] = Field(
        description="Day-of-year multiplier expression in `d` or explicit table"
    )
    default_daily_distribution: Union[str, List[int]] = Field(
        description="Hour-of-day order count expression in `h` or explicit table"
    )
    price_distribution: DistributionConfig = Field(
        description="Transaction amount distribution"
    )
    withdrawal_period_in_days: int = Field(
        ge=1,
        description="Days between withdrawals"
    )
    max_resample_attempts: int = Field(
        default=DEFAULT_MAX_RESAMPLE_ATTEMPTS,
        ge=1,
        description="Rejected draws allowed per positive sample"
    )

    @field_validator("default_daily_multipliers")
    @classmethod
    def validate_daily_multipliers(cls, v):
        """Ensure the day table materializes to 365 non-negative integers."""
        try:
            build_table(v, "d", DAYS_IN_YEAR, name="default_daily_multipliers")
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("default_daily_distribution")
    @classmethod
    def validate_daily_distribution(cls, v):
        """Ensure the hour table materializes to 24 non-negative integers."""
        try:
            build_table(v, "h", HOURS_IN_DAY, name="default_daily_distribution")
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return v

    def daily_multipliers(self) -> np.ndarray:
        """Base day-of-year multiplier table, shape (365,)."""
        return build_table(
            self.default_daily_multipliers, "d", DAYS_IN_YEAR,
            name="default_daily_multipliers",
        )

    def daily_distribution(self) -> np.ndarray:
        """Base hour-of-day order table, shape (24,)."""
        return build_table(
            self.default_daily_distribution, "h", HOURS_IN_DAY,
            name="default_daily_distribution",
        )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with POOLSIM_ (e.g., POOLSIM_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    log_format : str
        Log renderer: "console" or "json"
    default_seed : int, optional
        Seed used when the CLI is not given one. If None, a random seed
        is drawn and reported.

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'INFO'
    """

    model_config = SettingsConfigDict(
        env_prefix="POOLSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log output format"
    )
    default_seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Seed used when none is given on the command line"
    )
