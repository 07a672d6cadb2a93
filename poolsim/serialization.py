"""
Serialization module for poolsim.

Purpose
-------
JSON persistence for run configurations and simulation reports, enabling
sharing, version control and later reporting without re-running.

Design Principles
-----------------
- Type-safe: configs go through the Pydantic `SimConfig` schema
- Human-readable: indented JSON
- Reproducible: reports include the seed
- Versioned: files carry a `schema_version`; mismatches warn

Example
-------
>>> from pathlib import Path
>>> config = load_config(Path("config.json"))
>>> result = PoolSimulation(config, seed=7).run()
>>> save_result(result, Path("results/result.json"))
>>> load_result(Path("results/result.json")).seed
7
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .config import SimConfig
from .exceptions import ConfigurationError
from .simulation import PoolResult, SimulationResult

__all__ = [
    "SCHEMA_VERSION",
    "config_from_dict",
    "load_config",
    "save_config",
    "save_result",
    "load_result",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


def _check_schema_version(data: Dict[str, Any], path: Path) -> None:
    schema_version = data.get("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"{path} schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object.")
    return data


# ---------------------------------------------------------------------------
# SimConfig Serialization
# ---------------------------------------------------------------------------

def config_from_dict(data: Dict[str, Any]) -> SimConfig:
    """
    Validate a config dictionary into a `SimConfig`.

    The optional `schema_version` key is ignored here.

    Raises
    ------
    ConfigurationError
        If the dictionary does not match the schema.
    """
    data = {k: v for k, v in data.items() if k != "schema_version"}
    try:
        return SimConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid simulation config:\n{e}") from e


def load_config(path: Path) -> SimConfig:
    """
    Load a `SimConfig` from a JSON file.

    Parameters
    ----------
    path : Path
        Input file path.

    Returns
    -------
    SimConfig

    Examples
    --------
    >>> config = load_config(Path("config.json"))
    >>> config.withdrawal_period_in_days
    7
    """
    data = _read_json(path)
    _check_schema_version(data, path)
    return config_from_dict(data)


def save_config(config: SimConfig, path: Path) -> None:
    """Save *config* as JSON, tagged with the schema version."""
    data = {"schema_version": SCHEMA_VERSION}
    data.update(config.model_dump(mode="json"))

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


# ---------------------------------------------------------------------------
# SimulationResult Serialization
# ---------------------------------------------------------------------------

def save_result(result: SimulationResult, path: Path) -> None:
    """
    Save a `SimulationResult` to a JSON file.

    Examples
    --------
    >>> save_result(result, Path("results/result.json"))
    """
    data: Dict[str, Any] = {"schema_version": SCHEMA_VERSION}
    data.update(result.to_dict())

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_result(path: Path) -> SimulationResult:
    """Load a `SimulationResult` saved by `save_result`."""
    data = _read_json(path)
    _check_schema_version(data, path)
    try:
        return SimulationResult(
            total_number_of_transactions=int(data["total_number_of_transactions"]),
            peak_parallel_transactions_number=int(data["peak_parallel_transactions_number"]),
            pool_results=[
                PoolResult(
                    pool_name=p["pool_name"],
                    total_number_of_transactions_during_withdrawals=int(
                        p["total_number_of_transactions_during_withdrawals"]
                    ),
                    total_number_of_accounts=int(p["total_number_of_accounts"]),
                )
                for p in data["pool_results"]
            ],
            seed=data.get("seed"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"{path} is not a simulation result: {e}") from e
