"""
Command-Line Interface for poolsim.

Purpose
-------
Runs pooling-strategy comparisons from a JSON configuration and renders
the reports, without writing Python code.

Commands
--------
- run: Simulate all strategies on the same synthetic traffic
- config: Validate, display and create configuration files
- report: Summarize a saved simulation result
- info: Show package and dependency versions

Example Usage
-------------
    # Run a comparison with a fixed seed
    $ poolsim run --config config.json --seed 42 --output results/result.json

    # Create a starter configuration
    $ poolsim config create config.json --template seasonal

    # Show a saved result
    $ poolsim report -r results/result.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click


def _get_console():
    """Rich console for formatted output."""
    from rich.console import Console
    return Console()


# Version
__version__ = "0.1.0"


@click.group()
@click.version_option(version=__version__, prog_name="poolsim")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Log level (default: POOLSIM_LOG_LEVEL or INFO)",
)
@click.pass_context
def main(ctx: click.Context, quiet: bool, log_level: Optional[str]) -> None:
    """
    poolsim - Account pooling strategy simulator.

    Generates synthetic shop traffic and compares how many ledger accounts
    and withdrawal transactions each pooling strategy needs.

    Use 'poolsim COMMAND --help' for command-specific help.
    """
    from .logging_config import configure_logging

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = None if quiet else _get_console()
    configure_logging(level=log_level or ("WARNING" if quiet else None))


def _print_result(console, result) -> None:
    """Render a SimulationResult as rich tables, or plain lines without a console."""
    if console is None:
        click.echo(f"Total number of transactions: {result.total_number_of_transactions}")
        click.echo(f"Peak parallel transactions number: {result.peak_parallel_transactions_number}")
        for pool in result.pool_results:
            click.echo("")
            click.echo(f"Results for {pool.pool_name}:")
            click.echo(f"Total number of accounts: {pool.total_number_of_accounts}")
            click.echo(
                "Total number of transactions during withdrawals: "
                f"{pool.total_number_of_transactions_during_withdrawals}"
            )
        return

    from rich.table import Table

    summary = Table(title="Traffic", show_header=True)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green", justify="right")
    if result.seed is not None:
        summary.add_row("Seed", str(result.seed))
    summary.add_row("Total transactions", f"{result.total_number_of_transactions:,}")
    summary.add_row("Peak parallel transactions", f"{result.peak_parallel_transactions_number:,}")
    console.print(summary)

    pools = Table(title="Pooling Strategies", show_header=True)
    pools.add_column("Pool", style="cyan")
    pools.add_column("Accounts", style="green", justify="right")
    pools.add_column("Withdrawal transactions", style="green", justify="right")
    for pool in result.pool_results:
        pools.add_row(
            pool.pool_name,
            f"{pool.total_number_of_accounts:,}",
            f"{pool.total_number_of_transactions_during_withdrawals:,}",
        )
    console.print(pools)


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to simulation configuration file (JSON)"
)
@click.option(
    "--seed", "-s",
    type=click.IntRange(min=0),
    default=None,
    help="Random seed for reproducibility (default: POOLSIM_DEFAULT_SEED or random)"
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the result as JSON to this file"
)
@click.option(
    "--history",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the day-by-day history as CSV to this file"
)
@click.option(
    "--plot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save a history chart (PNG) to this file"
)
@click.pass_context
def run(
    ctx: click.Context,
    config: Path,
    seed: Optional[int],
    output: Optional[Path],
    history: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Run a pooling-strategy comparison.

    Example:
        poolsim run -c config.json --seed 42 -o results/result.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .config import AppSettings
    from .exceptions import PoolSimError
    from .serialization import load_config, save_result
    from .simulation import PoolSimulation

    try:
        sim_config = load_config(config)
    except PoolSimError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    if seed is None:
        seed = AppSettings().default_seed
    record_history = history is not None or plot is not None
    simulation = PoolSimulation(sim_config, seed=seed, record_history=record_history)

    if console:
        console.print(f"[bold]Seed: {simulation.seed}[/bold]")
        console.print(
            f"[bold blue]Simulating {sim_config.simulated_shops_number:,} shops "
            f"over {sim_config.simulated_years_number} year(s)...[/bold blue]"
        )
    elif not quiet:
        click.echo(f"Seed: {simulation.seed}")

    try:
        result = simulation.run()
    except PoolSimError as e:
        click.echo(f"Error during simulation: {e}", err=True)
        sys.exit(1)

    if not quiet:
        _print_result(console, result)

    if output:
        save_result(result, output)
        if not quiet:
            click.echo(f"Results saved to {output}")

    if record_history:
        frame = simulation.history.to_frame()
        if history:
            history.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(history)
            if not quiet:
                click.echo(f"History saved to {history}")
        if plot:
            from .plotting import plot_history
            plot_history(frame, save_path=plot)
            if not quiet:
                click.echo(f"Chart saved to {plot}")


@main.group()
def config() -> None:
    """
    Configuration management commands.

    Validate, display, and create simulation configuration files.
    """
    pass


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate a configuration file.

    Checks that the file is valid JSON, conforms to the schema and that
    the day and hour tables evaluate to non-negative integers.

    Example:
        poolsim config validate config.json
    """
    console = ctx.obj.get("console")

    from .exceptions import PoolSimError
    from .serialization import load_config

    try:
        sim_config = load_config(config_file)
    except PoolSimError as e:
        click.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    hourly = sim_config.daily_distribution()
    multipliers = sim_config.daily_multipliers()
    if console:
        from rich.panel import Panel

        info = (
            f"[bold]Simulation Configuration Valid[/bold]\n\n"
            f"[cyan]Shops:[/cyan] {sim_config.simulated_shops_number:,}\n"
            f"[cyan]Years:[/cyan] {sim_config.simulated_years_number}\n"
            f"[cyan]Base orders per day:[/cyan] {int(hourly.sum()):,}\n"
            f"[cyan]Day multipliers:[/cyan] min {int(multipliers.min())}, max {int(multipliers.max())}\n"
            f"[cyan]Withdrawal every:[/cyan] {sim_config.withdrawal_period_in_days} day(s)"
        )
        console.print(Panel(info, title="Configuration Summary", border_style="green"))
    else:
        click.echo("Configuration is valid")


@config.command("show")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "-f", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def config_show(ctx: click.Context, config_file: Path, format: str) -> None:
    """
    Display configuration details.

    Example:
        poolsim config show config.json --format table
    """
    console = ctx.obj.get("console")

    from .exceptions import PoolSimError
    from .serialization import _read_json

    try:
        config_data = _read_json(config_file)
    except PoolSimError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    if format == "json" or console is None:
        click.echo(json.dumps(config_data, indent=2))
        return

    from rich.table import Table

    table = Table(title="Simulation Configuration")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in config_data.items():
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items())
        elif isinstance(value, list):
            value = f"[{len(value)} values]"
        table.add_row(key, str(value))
    console.print(table)


@config.command("create")
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--template", "-t", type=click.Choice(["basic", "seasonal"]), default="basic")
@click.pass_context
def config_create(ctx: click.Context, output_file: Path, template: str) -> None:
    """
    Create a new configuration file from template.

    Example:
        poolsim config create my_config.json --template seasonal
    """
    quiet = ctx.obj.get("quiet", False)

    from .serialization import SCHEMA_VERSION

    config_data = {
        "schema_version": SCHEMA_VERSION,
        "simulated_shops_number": 100,
        "simulated_years_number": 1,
        "shop_size_distribution": {"mean": 1.0, "std_dev": 0.5},
        "sales_per_year_for_each_shop": 0,
        "sale_multiplier": 1,
        "default_daily_multipliers": "1",
        "default_daily_distribution": "where((h >= 9) & (h < 21), 2, 0)",
        "price_distribution": {"mean": 40.0, "std_dev": 15.0},
        "withdrawal_period_in_days": 7,
    }
    if template == "seasonal":
        config_data.update({
            "simulated_shops_number": 500,
            "simulated_years_number": 2,
            "shop_size_distribution": {"kind": "lognormal", "mean": 0.0, "std_dev": 0.75},
            "sales_per_year_for_each_shop": 4,
            "sale_multiplier": 3,
            "default_daily_multipliers": "2 + where(d >= 330, 2, 0) + where(d % 7 >= 5, 1, 0)",
            "default_daily_distribution": "6 * exp(-((h - 13) ** 2) / 18)",
            "price_distribution": {"kind": "lognormal", "mean": 3.5, "std_dev": 0.6},
        })

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w") as f:
        json.dump(config_data, f, indent=2)

    if not quiet:
        click.echo(f"Created configuration file: {output_file}")


@main.command()
@click.option(
    "--result", "-r",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to simulation result file (JSON)"
)
@click.option(
    "--format", "-f",
    type=click.Choice(["summary", "json", "csv"]),
    default="summary",
    help="Output format (default: summary)"
)
@click.pass_context
def report(ctx: click.Context, result: Path, format: str) -> None:
    """
    Generate reports from a saved simulation result.

    Example:
        poolsim report -r results/result.json --format csv
    """
    console = ctx.obj.get("console")

    from .exceptions import PoolSimError
    from .serialization import load_result

    try:
        sim_result = load_result(result)
    except PoolSimError as e:
        click.echo(f"Error loading result: {e}", err=True)
        sys.exit(1)

    if format == "summary":
        _print_result(console, sim_result)
    elif format == "json":
        click.echo(json.dumps(sim_result.to_dict(), indent=2))
    else:
        click.echo(sim_result.to_frame().to_csv(), nl=False)


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display system and package information.
    """
    console = ctx.obj.get("console")

    info_lines = [
        f"poolsim Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    dependencies = {
        "numpy": "numpy",
        "numexpr": "numexpr",
        "pandas": "pandas",
        "pydantic": "pydantic",
        "structlog": "structlog",
        "matplotlib": "matplotlib",
        "rich": "rich",
        "click": "click",
    }
    for name, module in dependencies.items():
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "installed")
            info_lines.append(f"{name}: {version}")
        except ImportError:
            info_lines.append(f"{name}: not installed")

    if console:
        from rich.panel import Panel
        console.print(Panel("\n".join(info_lines), title="System Information"))
    else:
        for line in info_lines:
            click.echo(line)


if __name__ == "__main__":
    main()
