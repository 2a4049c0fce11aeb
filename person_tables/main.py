from __future__ import annotations

import sys
from typing import Optional

import typer
import uvicorn
from rich import box
from rich.console import Console
from rich.table import Table

from person_tables.api.app import create_app
from person_tables.bootstrap import bootstrap
from person_tables.config import get_settings
from person_tables.domain.errors import PersonTablesError
from person_tables.query.criteria import DataTableCriteria
from person_tables.response.assembler import TableResponse, respond
from person_tables.seeding.generator import SampleDataGenerator
from person_tables.store import build_store
from person_tables.utils.logging import configure_logging, get_logger

app = typer.Typer(help="person-tables: person records behind a DataTables-compatible API.")
console = Console()
log = get_logger(__name__)


def _render_envelope(envelope: TableResponse) -> None:
    table = Table(title="person datatable", box=box.SIMPLE_HEAVY)
    table.add_column("id", justify="right", style="cyan")
    table.add_column("name")
    table.add_column("birth")
    table.add_column("eyes", style="magenta")
    for person in envelope.data:
        table.add_row(str(person.id), person.name, person.birth.isoformat(), person.eyes.value)
    console.print(table)
    typer.echo(
        f"draw={envelope.draw} recordsTotal={envelope.records_total} "
        f"recordsFiltered={envelope.records_filtered}"
    )
    if envelope.error:
        console.print(f"[bold red]error:[/bold red] {envelope.error}")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"store={settings.store_backend} "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"http={settings.http_host}:{settings.http_port} | "
        f"seed={'on' if settings.seed_enabled else 'off'} rows={settings.seed_rows} "
        f"years={settings.seed_years}"
    )


@app.command()
def serve() -> None:
    """
    Bootstrap the store (schema + sample data) and serve HTTP.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        context = bootstrap(settings)
    except PersonTablesError as exc:
        log.error("Startup aborted", extra={"error": str(exc)})
        typer.echo(f"Startup aborted: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        uvicorn.run(
            create_app(context.engine, default_length=settings.datatable_default_length),
            host=settings.http_host,
            port=settings.http_port,
            log_config=None,
        )
    finally:
        context.close()


@app.command()
def seed(
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-r",
        help="Number of records to insert (default from settings).",
    ),
    years: Optional[int] = typer.Option(
        None,
        "--years",
        help="Birth dates fall within this many years before today.",
    ),
    random_seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Deterministic RNG seed.",
    ),
) -> None:
    """
    Insert synthetic person records into the configured store.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    store = build_store(settings)
    try:
        ensure_schema = getattr(store, "ensure_schema", None)
        if callable(ensure_schema):
            ensure_schema()
        report = SampleDataGenerator(
            store,
            rows=rows if rows is not None else settings.seed_rows,
            years=years or settings.seed_years,
            seed=random_seed if random_seed is not None else settings.seed_random_seed,
        ).generate()
    except PersonTablesError as exc:
        typer.echo(f"Seeding failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        store.close()
    typer.echo(
        f"Inserted {report.rows:,} records in {report.duration_seconds:.2f}s "
        f"({report.rows_per_sec:,.0f} rows/s)."
    )


@app.command()
def query(
    draw: int = typer.Option(1, "--draw", help="Draw counter to echo."),
    start: int = typer.Option(0, "--start", help="Row offset (multiple of --length)."),
    length: int = typer.Option(10, "--length", "-l", help="Page size."),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Name substring."),
) -> None:
    """
    Run one datatable query against the store and print the page.

    With the memory backend the store starts empty, so sample data is seeded first.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if settings.store_backend != "memory":
        settings = settings.model_copy(update={"seed_enabled": False})
    try:
        context = bootstrap(settings)
    except PersonTablesError as exc:
        typer.echo(f"Query failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        envelope, failure = respond(
            context.engine,
            DataTableCriteria(draw=draw, start=start, length=length, search=search),
        )
    finally:
        context.close()
    _render_envelope(envelope)
    if failure is not None:
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
