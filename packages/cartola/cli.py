# ruff: noqa: I001
"""CLI for the ``cartola`` package.

A thin developer entrypoint around :mod:`cartola.api`: ``inspect`` shows how
a statement file was read and which columns were matched, ``process`` runs the
whole pipeline and prints the categorized transactions. Environment variables
(notably ``GROQ_API_KEY``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import ArgumentInfo

from .logging_setup import configure_logging

console = Console()
err_console = Console(stderr=True)


def _read_file(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        err_console.print(f"Error: File not found: {path}")
    except PermissionError:
        err_console.print(f"Error: Permission denied: {path}")
    except IsADirectoryError:
        err_console.print(f"Error: Not a file: {path}")
    return None


def _amount_text(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}".replace(",", ".")
    return f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")


# ---- Command handlers ---------------------------------------------------------


def cmd_inspect(path: Path) -> int:
    """Print headers, sample rows and the inferred mapping for ``path``."""

    from .api import load_statement
    from .errors import StatementError

    data = _read_file(path)
    if data is None:
        return 1
    try:
        upload = load_statement(data, path.name)
    except StatementError as e:
        err_console.print(f"Error: {e.user_message}")
        return 1

    structure = upload.structure
    preview = Table(title=f"{path.name} ({len(structure.rows)} rows)")
    for header in structure.headers:
        preview.add_column(header)
    for row in structure.rows[:5]:
        preview.add_row(*(str(cell) for cell in row))
    console.print(preview)

    result = upload.mapping_result
    mapping = result.mapping
    mapped = Table(title="Column mapping")
    mapped.add_column("Field")
    mapped.add_column("Column")
    for name in ("date", "description", "amount", "cargo", "abono"):
        mapped.add_row(name, getattr(mapping, name) or "-")
    mapped.add_row("date_format", mapping.date_format)
    console.print(mapped)
    console.print(
        f"confidence={result.confidence:.2f} auto_detected={result.is_auto_detected} "
        f"valid={mapping.is_valid}"
    )
    if upload.drafts is not None:
        console.print(f"cargo/abono Excel layout recognized: {len(upload.drafts)} transactions")
    return 0


def cmd_process(path: Path, *, as_json: bool = False) -> int:
    """Run the full pipeline on ``path`` and print the transactions."""

    from .api import process_statement
    from .config import AIFallbackSettings
    from .errors import StatementError

    data = _read_file(path)
    if data is None:
        return 1
    try:
        settings = AIFallbackSettings.from_env()
    except ValueError as e:
        err_console.print(f"Error: invalid configuration: {e}")
        return 1
    try:
        transactions = asyncio.run(process_statement(data, path.name, ai_settings=settings))
    except StatementError as e:
        err_console.print(f"Error: {e.user_message}")
        return 1

    if as_json:
        typer.echo(json.dumps([asdict(t) for t in transactions], ensure_ascii=False, indent=2))
        return 0

    table = Table(title=f"{path.name}: {len(transactions)} transactions")
    table.add_column("ID", justify="right")
    table.add_column("Fecha")
    table.add_column("Descripción")
    table.add_column("Monto", justify="right")
    table.add_column("Tipo")
    table.add_column("Categoría")
    table.add_column("Confianza")
    table.add_column("Recurrente")
    for t in transactions:
        table.add_row(
            str(t.id),
            t.date,
            t.description,
            _amount_text(t.amount),
            t.type,
            t.selected_category,
            t.confidence,
            "sí" if t.is_recurring else "",
        )
    console.print(table)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Read bank statements (CSV/Excel), map their columns and categorize transactions. "
        "Loads GROQ_API_KEY from a local .env to enable the AI fallback."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a statement file (.csv, .xlsx, .xls)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # missing files are reported by the handler
)


@app.command("inspect")
def inspect_cmd(path: Annotated[Path, FILE_ARGUMENT]) -> None:
    """Show the parsed table and the inferred column mapping."""

    raise typer.Exit(cmd_inspect(path))


@app.command("process")
def process_cmd(
    path: Annotated[Path, FILE_ARGUMENT],
    as_json: bool = typer.Option(False, "--json", help="Print transactions as JSON."),
) -> None:
    """Extract and categorize all transactions in a statement."""

    raise typer.Exit(cmd_process(path, as_json=as_json))


@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already set in the environment
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging("DEBUG" if verbose else None)


if __name__ == "__main__":  # pragma: no cover
    app()
