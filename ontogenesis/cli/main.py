"""ontogenesis CLI — run kernel evolution from the terminal.

`ontogenesis run` seeds founder populations and runs generation cycles
synchronously, scoring every kernel with a simulated evaluator between
cycles. `ontogenesis templates` lists the built-in founder catalog.
"""

from __future__ import annotations

import random
from typing import List, Optional

import orjson
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ontogenesis.config import OntogenesisSettings
from ontogenesis.evolution.scheduler import EvolutionScheduler
from ontogenesis.exceptions import TemplateNotFoundError
from ontogenesis.kernel.models import FitnessUpdate, Kernel, KernelTemplate
from ontogenesis.kernel.templates import KERNEL_TEMPLATES, template_for
from ontogenesis.log import configure_logging
from ontogenesis.types import GeneType, KernelType

console = Console()

app = typer.Typer(
    name="ontogenesis",
    help="ontogenesis -- breed, select and evolve kernel populations.",
    no_args_is_help=True,
)


def resolve_templates(type_names: list[str]) -> list[KernelTemplate]:
    """Templates for the named kernel types, or the whole catalog if none named."""
    if not type_names:
        return list(KERNEL_TEMPLATES)
    templates = []
    for name in type_names:
        try:
            kernel_type = KernelType(name)
        except ValueError:
            raise TemplateNotFoundError(f"Unknown kernel type: {name}") from None
        template = template_for(kernel_type)
        if template is None:
            raise TemplateNotFoundError(f"No template for kernel type: {name}")
        templates.append(template)
    return templates


def simulated_scores(kernel: Kernel, rng: random.Random) -> FitnessUpdate:
    """Stand-in for the external scoring services.

    Performance tracks the mean of the kernel's parameter genes (clamped to
    [0, 1]); the other dimensions are noisy around neutral.
    """
    values = [
        min(1.0, max(0.0, g.value))
        for g in kernel.genome.core_genes
        if g.type == GeneType.PARAMETER
    ]
    base = sum(values) / len(values) if values else 0.5
    return FitnessUpdate(
        performance=base + rng.gauss(0, 0.05),
        efficiency=rng.uniform(0.3, 0.8),
        reliability=rng.uniform(0.4, 0.9),
        adaptability=rng.uniform(0.2, 0.8),
        innovation=min(1.0, 0.3 + 0.1 * len(kernel.lineage.mutations)),
    )


@app.command("templates")
def templates():
    """List the built-in kernel templates."""
    table = Table(title="Kernel Templates")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Genes", style="blue")
    table.add_column("Description", style="dim")

    for template in KERNEL_TEMPLATES:
        table.add_row(
            template.type.value,
            template.name,
            ", ".join(g.id for g in template.base_genome.core_genes),
            template.description,
        )

    console.print(table)


@app.command("run")
def run(
    generations: int = typer.Option(10, "--generations", "-g", min=1, help="Cycles to run"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="RNG seed"),
    kernel_types: Optional[List[str]] = typer.Option(
        None, "--type", "-t", help="Kernel type to evolve (repeatable)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the final state as JSON"),
):
    """Seed founder populations and run generation cycles."""
    settings = OntogenesisSettings(seed=seed) if seed is not None else OntogenesisSettings()
    configure_logging(settings.log_level)

    try:
        selected = resolve_templates(kernel_types or [])
    except TemplateNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    scheduler = EvolutionScheduler(settings=settings, templates=selected)
    scorer = random.Random(seed)
    scheduler.ensure_populations()

    for _ in range(generations):
        for population in scheduler.snapshot().populations:
            for kernel in population.kernels:
                scheduler.evaluate_fitness(kernel.id, simulated_scores(kernel, scorer))
        scheduler.tick()

    state = scheduler.snapshot()

    if as_json:
        typer.echo(orjson.dumps({
            "generation": state.global_generation,
            "total_kernels_created": state.total_kernels_created,
            "archived": len(state.archive),
            "emergence_events": [e.model_dump(mode="json") for e in state.emergence_events],
            "populations": [
                {
                    "name": p.name.value,
                    "generation": p.generation,
                    "size": p.size,
                    "statistics": p.statistics.model_dump(mode="json"),
                }
                for p in state.populations
            ],
        }, option=orjson.OPT_INDENT_2).decode())
        return

    table = Table(title=f"Populations — generation {state.global_generation}")
    table.add_column("Type", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Avg", justify="right", style="green")
    table.add_column("Best", justify="right", style="bold green")
    table.add_column("Diversity", justify="right", style="blue")
    table.add_column("Archived", justify="right", style="dim")

    for p in state.populations:
        stats = p.statistics
        table.add_row(
            p.name.value,
            str(p.size),
            f"{stats.average_fitness:.3f}",
            f"{stats.best_fitness:.3f}",
            f"{stats.diversity_index:.2f}",
            str(stats.archived_count),
        )

    console.print(table)
    console.print(Panel(
        f"Kernels created: {state.total_kernels_created}\n"
        f"Archived:        {len(state.archive)}\n"
        f"Emergence:       {len(state.emergence_events)} events",
        title="Evolution Summary",
        border_style="cyan",
    ))


@app.command("version")
def version():
    """Show the installed version."""
    from ontogenesis import __version__
    console.print(f"ontogenesis v{__version__}")


def main():
    app()
