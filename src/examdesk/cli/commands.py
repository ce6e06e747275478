"""CLI commands for examdesk.

Commands:
- init-db: Create the database file and schema
- serve: Run the Web API with uvicorn
- tests: List a teacher's tests
- results: Print a graded attempt (text or JSON)
"""

import dataclasses
import json
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

from examdesk.config.app_config import load_app_config
from examdesk.core.assembler import list_tests
from examdesk.core.errors import ExamdeskError
from examdesk.core.results import get_results
from examdesk.db.database import open_database

app = typer.Typer(
    name="examdesk",
    help="Test authoring and auto-graded test taking.",
    no_args_is_help=True,
)

console = Console()


def _stderr_logger(*args) -> structlog.PrintLogger:
    return structlog.PrintLogger(file=sys.stderr)


@app.callback()
def main() -> None:
    """Test authoring and auto-graded test taking."""
    # Logs go to stderr; stdout carries command output only
    structlog.configure(logger_factory=_stderr_logger)


def _resolve_db_path(db_path: Path | None) -> Path:
    """Explicit --db wins over configuration."""
    return db_path or load_app_config().database.path


def _fail(error: ExamdeskError) -> None:
    console.print(f"[red]✗ {error.message}[/red]")
    raise typer.Exit(code=1)


@app.command(name="init-db")
def init_db(
    db_path: Path | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Create the database file and its tables."""
    path = _resolve_db_path(db_path)
    try:
        with open_database(path):
            pass
    except ExamdeskError as e:
        _fail(e)

    console.print(f"[green]✓ Database ready:[/green] {path}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    db_path: Path | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Run the Web API."""
    import uvicorn

    from examdesk.config.app_config import DatabaseConfig
    from examdesk.web.api import create_app

    config = load_app_config()
    if db_path is not None:
        config = dataclasses.replace(config, database=DatabaseConfig(path=db_path))

    console.print(f"[bold]examdesk API[/bold] on http://{host}:{port} (db: {config.database.path})")
    uvicorn.run(create_app(config=config), host=host, port=port)


@app.command(name="tests")
def list_teacher_tests(
    teacher_id: str = typer.Argument(..., help="Teacher ID"),
    db_path: Path | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """List the tests created by a teacher."""
    try:
        with open_database(_resolve_db_path(db_path)) as db:
            tests = list_tests(db, teacher_id)
    except ExamdeskError as e:
        _fail(e)

    if not tests:
        console.print("[yellow]No tests found[/yellow]")
        return

    console.print(f"\n[bold]Tests ({len(tests)}):[/bold]\n")
    for test in tests:
        console.print(f"  [bold]{test.title}[/bold]  [dim]{test.id}[/dim]")
        console.print(f"    [dim]duration:[/dim] {test.duration_minutes} min")
        console.print(f"    [dim]marks:[/dim]    {test.total_marks}")
        console.print()


@app.command()
def results(
    attempt_id: str = typer.Argument(..., help="Attempt ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    db_path: Path | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Print the results of an attempt."""
    config = load_app_config()
    try:
        with open_database(_resolve_db_path(db_path)) as db:
            report = get_results(db, attempt_id, pass_percentage=config.results.pass_percentage)
    except ExamdeskError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    attempt = report.attempt
    summary = report.summary

    verdict = "[green]PASSED[/green]" if summary.passed else "[red]FAILED[/red]"
    console.print(f"\n[bold]Attempt {attempt.id}[/bold]  {verdict}")
    console.print(f"  [dim]status:[/dim] {attempt.status}")
    console.print(
        f"  [dim]score:[/dim]  {summary.obtained_marks}/{summary.total_marks} "
        f"({summary.percentage}%)"
    )
    console.print()

    for index, answer in enumerate(report.answers, start=1):
        mark = "[green]✓[/green]" if answer.is_correct else "[red]✗[/red]"
        console.print(f"  {mark} Q{index}. {answer.question_text}")
        console.print(f"      [dim]your answer:[/dim]    {answer.student_answer!r}")
        console.print(f"      [dim]correct answer:[/dim] {answer.correct_answer!r}")
        console.print(f"      [dim]marks:[/dim]          {answer.marks_obtained}/{answer.marks}")
