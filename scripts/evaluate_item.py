#!/usr/bin/env python
"""
Evaluate the distractors of a single multiple-choice item locally.

The input JSON holds the item and the persona probability estimates:

    {
      "correct_answer": "...",
      "distractors": ["...", "...", "..."],
      "personas": [{"name": "Expert", "probs": {"A": 0.9, "B": 0.05}}, ...]
    }
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from distractor_service.config import (
    DEFAULT_PRESET,
    EvaluationConfig,
    get_preset,
    load_config,
)
from distractor_service.core.data_models import DistractorEvaluation
from distractor_service.core.exceptions import InvalidInputError
from distractor_service.core.utils import get_rng
from distractor_service.pipeline import build_options, evaluate_item
from distractor_service.simulation import (
    choice_distribution,
    parse_persona_estimates,
    resolve_personas,
)

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


def read_item(input_path: Path) -> dict[str, Any]:
    """Read the item JSON; abort on malformed files."""
    try:
        with open(input_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {input_path}: {e}[/red]")
        raise typer.Exit(1) from e

    if not isinstance(data, dict):
        console.print("[red]Item file must contain a JSON object[/red]")
        raise typer.Exit(1)
    for key in ("correct_answer", "distractors"):
        if key not in data:
            console.print(f"[red]Item file is missing '{key}'[/red]")
            raise typer.Exit(1)
    distractors = data["distractors"]
    if not isinstance(distractors, list) or not all(
        isinstance(d, str) for d in distractors
    ):
        console.print("[red]'distractors' must be a list of strings[/red]")
        raise typer.Exit(1)
    return data


def print_accuracy_table(evaluation: DistractorEvaluation) -> None:
    """Pretty-print per-persona accuracy and choice distribution."""
    simulation = evaluation.simulation
    distribution = choice_distribution(simulation)
    labels = [o.label for o in simulation.options]

    table = Table(title="Simulated Accuracy by Persona")
    table.add_column("Persona", style="bold")
    table.add_column("N", justify="right")
    table.add_column("Accuracy", justify="right")
    for label in labels:
        table.add_column(f"% {label}", justify="right")

    for row in simulation.accuracy:
        shares = distribution.loc[row.persona]
        table.add_row(
            row.persona,
            str(row.total),
            f"{row.accuracy:.1%}",
            *(f"{shares[label]:.1%}" for label in labels),
        )

    console.print(table)


def print_shapley_table(evaluation: DistractorEvaluation) -> None:
    """Pretty-print the Shapley rows."""
    table = Table(title="Shapley Distractor Evaluation")
    table.add_column("Option", style="bold")
    table.add_column("Shapley", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("% of all", justify="right")
    table.add_column("% low ability", justify="right")
    table.add_column("Recommendation")

    for r in evaluation.shapley:
        style = "red" if r.strength == "weak" else None
        table.add_row(
            f"{r.label}. {r.text}",
            f"{r.shapley:.3f}",
            f"{r.share_pct:.1f}%",
            f"{r.wrong_pct:.1f}%",
            f"{r.novice_pct:.1f}%",
            r.recommendation,
            style=style,
        )

    console.print(table)


def save_report(output_dir: Path, evaluation: DistractorEvaluation) -> Path:
    """Save the full evaluation JSON to output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = output_dir / f"{timestamp}_evaluation.json"
    with open(path, "w") as f:
        f.write(evaluation.model_dump_json(indent=2))
    return path


@app.command()
def main(
    input_path: Path = typer.Argument(
        ...,
        help="Path to item JSON file",
    ),
    preset: str = typer.Option(
        DEFAULT_PRESET,
        help="Evaluation preset name",
    ),
    config_path: Path | None = typer.Option(
        None,
        help="YAML evaluation config (overrides --preset)",
    ),
    total_samples: int | None = typer.Option(
        None,
        help="Total simulated responses across personas",
    ),
    random_seed: int | None = typer.Option(
        None,
        help="Random seed for reproducibility",
    ),
    output_dir: Path | None = typer.Option(
        None,
        help="Directory for JSON report output",
    ),
) -> None:
    """Simulate responses to an item and rank its distractors."""

    # 1. Validate input
    if not input_path.exists():
        console.print(f"[red]File not found: {input_path}[/red]")
        raise typer.Exit(1)

    config: EvaluationConfig = (
        load_config(config_path)
        if config_path is not None
        else get_preset(preset)
    )
    item = read_item(input_path)

    # 2. Build options and personas
    try:
        options = build_options(
            str(item["correct_answer"]),
            item["distractors"],
        )
        estimates = parse_persona_estimates(item.get("personas", []))
        personas, fallback_warnings = resolve_personas(
            config.persona_names, estimates, [o.label for o in options]
        )
        evaluation = evaluate_item(
            options,
            personas,
            config=config,
            rng=get_rng(random_seed),
            total_samples=total_samples,
            input_warnings=fallback_warnings,
        )
    except InvalidInputError as e:
        console.print(f"[red]Invalid item: {e.message}[/red]")
        raise typer.Exit(1) from e

    simulation = evaluation.simulation
    console.print(
        Panel(
            f"[bold]Distractor Evaluation[/bold]\n\n"
            f"File: [cyan]{input_path}[/cyan]\n"
            f"Options: [cyan]{len(simulation.options)}[/cyan]\n"
            f"Personas: [cyan]{len(simulation.personas)}[/cyan]\n"
            f"Responses: [cyan]{simulation.n_responses}[/cyan]",
            title="Configuration",
        )
    )

    # 3. Display results
    print_accuracy_table(evaluation)
    print_shapley_table(evaluation)

    for warning in evaluation.warnings:
        console.print(f"[yellow]Warning: {warning.message}[/yellow]")

    if output_dir is not None:
        path = save_report(output_dir, evaluation)
        console.print(f"Report saved to [cyan]{path}[/cyan]")


if __name__ == "__main__":
    app()
