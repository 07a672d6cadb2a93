"""
Custom exceptions for poolsim.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all poolsim modules. All exceptions inherit from PoolSimError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
PoolSimError (base)
├── ConfigurationError - Invalid configuration, tables or distributions
└── InvariantViolationError - Internal invariant broken (e.g. NaN balance)

Usage
-----
>>> from poolsim.exceptions import ConfigurationError
>>>
>>> try:
...     result = PoolSimulation(config, seed=42).run()
>>> except PoolSimError as e:
...     print(f"poolsim error: {e}")
"""

__all__ = [
    "PoolSimError",
    "ConfigurationError",
    "InvariantViolationError",
]


class PoolSimError(Exception):
    """
    Base exception for all poolsim errors.

    Examples
    --------
    >>> try:
    ...     simulation.run()
    ... except PoolSimError as e:
    ...     logger.error("simulation_failed", error=str(e))
    """
    pass


class ConfigurationError(PoolSimError):
    """
    Invalid configuration or parameters.

    Raised before any simulation state is produced, such as:
    - A distribution that yields no positive sample within the attempt bound
    - A day/hour table expression that evaluates to a non-finite or
      negative value, or a table with the wrong length
    - A config file that fails schema validation

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "price_distribution produced no positive sample after 1000 draws. "
    ...     "Check mean and std_dev."
    ... )
    """
    pass


class InvariantViolationError(PoolSimError):
    """
    Internal invariant violation.

    Raised when a value that must be ordered (an account balance) is NaN.
    Indicates a sampling or arithmetic bug upstream; never coerced.

    Examples
    --------
    >>> raise InvariantViolationError("Account balance can't be NaN.")
    """
    pass
