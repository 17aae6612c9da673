"""ContentGuard CLI application.

This module provides the command-line interface for ContentGuard,
built with Typer.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from contentguard._version import __version__
from contentguard.core.config import get_settings
from contentguard.core.exceptions import ConfigurationError
from contentguard.core.logging import setup_logging
from contentguard.core.types import Problem, Severity, ValidationResult

app = typer.Typer(
    name="contentguard",
    help="Validate a content repository before syncing it",
    no_args_is_help=True,
)
console = Console()

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "blue",
    Severity.HINT: "dim",
}


class TyperPrompt:
    """Confirmation prompt backed by typer.confirm."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    async def confirm(self, problem_count: int) -> bool | None:
        if self.assume_yes:
            return True
        try:
            return typer.confirm(
                f"Found {problem_count} validation issues. Continue with push anyway?",
                default=False,
            )
        except typer.Abort:
            return None


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ContentGuard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """ContentGuard - content repository validation.

    Validate. Review. Sync.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)


def _build_engine(root: Path, prompt: TyperPrompt | None = None):
    from contentguard.validate.engine import ValidationEngine

    if not root.is_dir():
        console.print(f"[red]Error: Repository not found: {root}[/red]")
        raise typer.Exit(1)

    try:
        return ValidationEngine(root, prompt=prompt)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _published(engine) -> ValidationResult:
    problems: list[Problem] = []
    for path in engine.store.paths():
        problems.extend(engine.store.get(path))
    return ValidationResult(problems=problems, failures=list(engine.last_result.failures))


def _print_result(result: ValidationResult, root: Path) -> None:
    if not result.problems:
        console.print("[green]No problems found[/green]")
    else:
        table = Table(title="Validation Problems")
        table.add_column("File", style="cyan")
        table.add_column("Line", justify="right")
        table.add_column("Severity")
        table.add_column("Message")
        table.add_column("Source", style="dim")

        for path, problems in result.by_file().items():
            try:
                shown = str(Path(path).relative_to(root.resolve()))
            except ValueError:
                shown = path
            for problem in sorted(problems, key=lambda p: (p.severity, p.range.start.line)):
                style = SEVERITY_STYLES[problem.severity]
                table.add_row(
                    shown,
                    str(problem.range.start.line + 1),
                    f"[{style}]{problem.severity.label}[/{style}]",
                    problem.message,
                    problem.source,
                )
        console.print(table)

    counts = result.count_by_severity()
    summary = ", ".join(
        f"{severity.label}: {count}" for severity, count in counts.items() if count
    )
    if summary:
        console.print(f"\n[yellow]Problems by severity:[/yellow] {summary}")

    for failure in result.failures:
        console.print(f"[red]Could not validate[/red] {failure}")


def _write_report(result: ValidationResult, output: Path) -> None:
    with open(output, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)
    console.print(f"\n[green]Report saved to {output}[/green]")


@app.command()
def validate(
    root: Annotated[Path, typer.Argument(help="Repository root")] = Path("."),
    output: Annotated[Optional[Path], typer.Option(help="Output file for JSON report")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the report as JSON")] = False,
) -> None:
    """Validate every content item in a repository."""
    engine = _build_engine(root)

    if not as_json:
        console.print(f"[blue]Validating content in {root}...[/blue]")
    total = asyncio.run(engine.validate_all())
    result = _published(engine)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result, root)
        console.print(f"Total problems reported by validators: {total}")

    if output:
        _write_report(result, output)

    if result.has_errors:
        raise typer.Exit(1)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="File to validate")],
    root: Annotated[Path, typer.Option(help="Repository root")] = Path("."),
) -> None:
    """Validate a single metadata or body document."""
    if not file.exists():
        console.print(f"[red]Error: Path not found: {file}[/red]")
        raise typer.Exit(1)

    engine = _build_engine(root)
    result = asyncio.run(engine.validate_file(file))
    _print_result(result, root)

    if result.has_errors:
        raise typer.Exit(1)


@app.command()
def presync(
    root: Annotated[Path, typer.Argument(help="Repository root")] = Path("."),
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Continue despite problems")] = False,
) -> None:
    """Validate before a sync and decide whether to proceed."""
    engine = _build_engine(root, prompt=TyperPrompt(assume_yes=yes))

    proceed = asyncio.run(engine.validate_before_sync())
    result = _published(engine)
    if result.problems or result.failures:
        _print_result(result, root)

    if proceed:
        console.print("[green]Sync may proceed[/green]")
    else:
        console.print("[yellow]Sync cancelled[/yellow]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
