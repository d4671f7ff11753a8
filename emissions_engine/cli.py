# -*- coding: utf-8 -*-
"""
Emissions Engine CLI
====================

Developer CLI for running the emissions engine on already-parsed row
records stored as JSON or YAML.

Usage:
    emissions-engine calculate rows.json --region US
    emissions-engine calculate rows.yaml --factors extra_factors.yaml --json
    emissions-engine factors --region UK
    emissions-engine factors --region EU --factors extra_factors.yaml
    emissions-engine version
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from emissions_engine._version import __version__
from emissions_engine.calculator import EmissionsCalculator
from emissions_engine.config import get_config
from emissions_engine.exceptions import EmissionsEngineException
from emissions_engine.models import CalculationResult
from emissions_engine.registry import EmissionFactorRegistry

app = typer.Typer(
    name="emissions-engine",
    help="Emissions Engine: activity records to kg CO2e",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def _load_rows(path: Path) -> List[Any]:
    """Load a list of row records from a JSON or YAML file."""
    if path.suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    elif path.suffix in (".yaml", ".yml"):
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    else:
        console.print(f"[red]Unsupported input format: {path.suffix}[/red]")
        console.print("[yellow]Use .json or .yaml files[/yellow]")
        raise typer.Exit(1)

    if isinstance(data, dict):
        data = data.get("rows", [])
    if not isinstance(data, list):
        console.print("[red]Input must be a list of row records[/red]")
        raise typer.Exit(1)
    return data


def _build_calculator(factors_file: Optional[Path]) -> EmissionsCalculator:
    config = get_config()
    registry = EmissionFactorRegistry()
    factor_paths = [p for p in (config.factors_path, factors_file) if p]
    for factor_path in factor_paths:
        try:
            registry.load_file(factor_path)
        except EmissionsEngineException as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    return EmissionsCalculator(registry=registry, config=config)


def _print_result(result: CalculationResult) -> None:
    summary = result.summary

    table = Table(title="Emissions Summary", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Region", result.region)
    table.add_row("Total emissions (kg CO2e)", f"{result.total_emissions:,.2f}")
    table.add_row("Rows", str(summary.total_rows))
    table.add_row("Processed", str(summary.processed_rows))
    table.add_row("Skipped", str(summary.skipped_rows))
    table.add_row("Categories", str(summary.categories))
    table.add_row("Average confidence", f"{summary.average_confidence:.2f}")
    console.print(table)

    if result.category_breakdown:
        breakdown = Table(title="Breakdown", box=box.SIMPLE)
        breakdown.add_column("Category", style="green")
        breakdown.add_column("kg CO2e", justify="right")
        for category, emissions in result.category_breakdown.items():
            breakdown.add_row(category, f"{emissions:,.2f}")
        for activity, emissions in result.breakdown.items():
            breakdown.add_row(f"  {activity}", f"{emissions:,.2f}")
        console.print(breakdown)

    for warning in result.warnings:
        console.print(f"[yellow][WARN][/yellow] {warning}")
    for recommendation in result.recommendations:
        console.print(f"[blue][TIP][/blue] {recommendation}")


@app.command()
def calculate(
    rows_file: Path = typer.Argument(..., help="JSON/YAML list of row records"),
    region: Optional[str] = typer.Option(
        None, "--region", "-r", help="Preferred emission factor region",
    ),
    factors_file: Optional[Path] = typer.Option(
        None, "--factors", "-f", help="Extra factor catalog (JSON/YAML)",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the result as JSON",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose output with detailed logs",
    ),
):
    """Calculate emissions for a file of row records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_config().log_level,
    )

    if not rows_file.exists():
        console.print(f"[red]Input file not found: {rows_file}[/red]")
        raise typer.Exit(1)

    rows = _load_rows(rows_file)
    calculator = _build_calculator(factors_file)
    result = calculator.calculate_emissions(rows, region=region)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)


@app.command()
def factors(
    region: str = typer.Option(
        "Global", "--region", "-r", help="Region to list factors for",
    ),
    factors_file: Optional[Path] = typer.Option(
        None, "--factors", "-f", help="Extra factor catalog (JSON/YAML)",
    ),
):
    """List emission factors available for a region."""
    calculator = _build_calculator(factors_file)

    table = Table(title=f"Emission Factors ({region})", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Activity")
    table.add_column("Category", style="green")
    table.add_column("kg CO2e / unit", justify="right")
    table.add_column("Region")
    table.add_column("Source")
    for factor in calculator.get_available_factors(region):
        table.add_row(
            factor.factor_id,
            factor.activity,
            factor.category,
            f"{factor.factor:g} / {factor.unit}",
            factor.region,
            factor.source,
        )
    console.print(table)


@app.command()
def version():
    """Show emissions engine version"""
    console.print(f"[bold green]Emissions Engine v{__version__}[/bold green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
