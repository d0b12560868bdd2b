"""Main CLI entry point using Typer."""

import json
from pathlib import Path

import anyio
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from atomizer import __version__
from atomizer.core.exceptions import AtomizerError
from atomizer.scheduling.duration import format_minutes
from atomizer.scheduling.models import ExecutionPlan

app = typer.Typer(
    name="atomizer",
    help="Atomizer - dependency-aware execution plans for atomized projects",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Atomizer[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Atomizer - turn atomic tasks into an execution plan.

    Validates task dependencies, orders tasks, groups them for parallel
    execution and estimates time and cost.
    """
    pass


def _fail(error: AtomizerError) -> None:
    console.print(f"[bold red]{type(error).__name__}:[/bold red] {error}")
    raise typer.Exit(code=1)


def render_plan(plan: ExecutionPlan) -> None:
    """Print an execution plan as rich tables."""
    if plan.project and plan.project.title:
        console.print(Panel(plan.project.title, title="[bold blue]Project[/bold blue]"))

    critical = set(plan.critical_path.path)

    table = Table(title="Parallel Groups")
    table.add_column("Group", style="cyan")
    table.add_column("Task", style="bold")
    table.add_column("Category")
    table.add_column("Time", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Critical", justify="center")

    durations = plan.critical_path.durations
    for index, group in enumerate(plan.parallel_groups):
        for task_id in group:
            task = plan.get_task(task_id)
            table.add_row(
                str(index),
                f"{task_id}: {task.title}" if task else task_id,
                task.category if task else "-",
                format_minutes(durations[task_id]),
                f"${task.estimated_cost}" if task else "-",
                "*" if task_id in critical else "",
            )

    console.print(table)

    summary = Table(title="Estimates", show_header=False)
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Tasks", str(plan.cost.task_count))
    summary.add_row("Groups", str(plan.total_groups))
    summary.add_row("Sequential time", format_minutes(plan.cost.sequential_time))
    summary.add_row("Parallel time", format_minutes(plan.cost.parallel_time))
    summary.add_row("Critical path", format_minutes(plan.critical_path.length))
    summary.add_row("Speedup", f"{plan.cost.speedup:.2f}x")
    summary.add_row("Total cost", f"${plan.cost.total_cost}")
    console.print(summary)

    console.print(f"[dim]Critical path:[/dim] {' -> '.join(plan.critical_path.path)}")


def _emit(plan: ExecutionPlan, as_json: bool, output: Path | None) -> None:
    contract = json.dumps(plan.to_contract(), indent=2)
    if output:
        output.write_text(contract + "\n")
        console.print(f"[green]Saved to {output}[/green]")
    if as_json:
        typer.echo(contract)
    elif not output:
        render_plan(plan)


@app.command()
def plan(
    payload_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="File holding the atomization JSON or raw generation output",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the execution contract as JSON",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the execution contract to a file",
    ),
) -> None:
    """
    Build an execution plan from an atomization payload.

    Example:
        atomizer plan tasks.json --json
    """
    from atomizer.core.orchestrator import Atomizer

    atomizer = Atomizer()
    try:
        result = atomizer.plan_from_text(payload_file.read_text())
    except AtomizerError as e:
        _fail(e)
    else:
        _emit(result, as_json, output)


@app.command()
def prompt(
    description: str = typer.Argument(..., help="Project description or path to a file"),
    complexity: str = typer.Option("medium", "--complexity", "-c", help="Target complexity"),
    tech_stack: str = typer.Option("auto-detect", "--stack", "-s", help="Tech stack hint"),
) -> None:
    """
    Print the atomization prompt for a project description.
    """
    from atomizer.core.orchestrator import Atomizer

    description_path = Path(description)
    if description_path.exists() and description_path.is_file():
        description = description_path.read_text()

    typer.echo(Atomizer().build_prompt(description, complexity, tech_stack))


@app.command()
def atomize(
    description: str = typer.Argument(..., help="Project description or path to a file"),
    complexity: str = typer.Option("medium", "--complexity", "-c", help="Target complexity"),
    tech_stack: str = typer.Option("auto-detect", "--stack", "-s", help="Tech stack hint"),
    as_json: bool = typer.Option(False, "--json", help="Print the execution contract as JSON"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the execution contract to a file",
    ),
) -> None:
    """
    Atomize a project with the generation CLI and plan the result.

    Example:
        atomizer atomize "Build a REST API with user authentication"
    """
    from atomizer.core.orchestrator import Atomizer

    description_path = Path(description)
    if description_path.exists() and description_path.is_file():
        description = description_path.read_text()
        console.print(f"[dim]Loaded description from {description_path}[/dim]")

    atomizer = Atomizer()

    async def execute() -> ExecutionPlan:
        return await atomizer.atomize(description, complexity, tech_stack)

    try:
        result = anyio.run(execute)
    except AtomizerError as e:
        _fail(e)
    else:
        _emit(result, as_json, output)


@app.command()
def config() -> None:
    """
    Show the current configuration.
    """
    from atomizer.core.config import get_settings

    settings = get_settings()

    table = Table(title="Current Configuration")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Dir", settings.log_dir)
    table.add_row("Max Tasks", str(settings.max_tasks))
    table.add_row("Claude Command", settings.claude_command)
    table.add_row("Generation Timeout", f"{settings.generation_timeout}s")
    table.add_row("Token Cache Size", str(settings.token_cache_size))
    table.add_row("Token Cache TTL", f"{settings.token_cache_ttl}s")

    console.print(table)


if __name__ == "__main__":
    app()
