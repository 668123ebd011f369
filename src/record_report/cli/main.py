"""
record-report CLI
==================
Command-line interface for the record-report library.

Commands:
    render      Render a JSON export of collections into a PDF report
    inspect     Show the tables stored in a report PDF
    version     Show version information

Usage::

    record-report render export.json -o report.pdf --overflow spill
    record-report inspect report.pdf --format json

The render input is a JSON object mapping collection names to lists of
documents::

    {"todos": [{"id": "1", "title": "Buy milk"}, {"id": "2", "title": "Call Sam"}]}
"""

from __future__ import annotations

import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import Field, PydanticUserError, ValidationError, create_model
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config import OverflowPolicy, ReportSettings
from ..models.record import Record

console = Console()
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
        force=True,
    )


def record_type_for(collection: str, documents: list[dict[str, Any]]) -> type[Record]:
    """
    Build a Record type for a collection of plain JSON documents.

    Columns are ``id`` followed by every other key in first-seen order. Each
    key is stored on a generated attribute (``column_0``, ``column_1``, ...)
    and aliased back to the key, so any JSON key is accepted verbatim and
    none can shadow a model attribute.
    """
    keys: list[str] = []
    for doc in documents:
        for key in doc:
            if key != "id" and key not in keys:
                keys.append(key)
    fields: dict[str, Any] = {
        f"column_{i}": (Any, Field(None, alias=key)) for i, key in enumerate(keys)
    }

    class_name = "".join(part.capitalize() for part in re.split(r"\W+", collection) if part) or "Collection"
    model = create_model(class_name, __base__=Record, **fields)
    model.collection_name = collection
    return model


@click.group()
@click.version_option(version=__version__, prog_name="record-report")
@click.option("--log-level", default=None, help="Logging level (default: RECORD_REPORT_LOG_LEVEL or INFO)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """
    record-report – typed records to paginated PDF tables.
    """
    settings = ReportSettings()
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True,
              help="Output PDF path")
@click.option("--overflow", type=click.Choice([p.value for p in OverflowPolicy]), default=None,
              help="Rows that do not fit: drop them (truncate) or continue on new pages (spill)")
@click.option("--title", default=None, help="Document title")
@click.pass_obj
def render(
    settings: ReportSettings,
    input_path: Path,
    output: Path,
    overflow: str | None,
    title: str | None,
) -> None:
    """Render a JSON export of collections into a PDF report."""
    from ..builder.report_builder import ReportBuilder
    from ..store.backend import InMemoryBackend
    from ..store.service import RecordStore

    try:
        payload = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {input_path}: {e}[/red]")
        sys.exit(1)

    if not isinstance(payload, dict):
        console.print("[red]Input must be a JSON object mapping collection names to lists[/red]")
        sys.exit(1)

    builder = ReportBuilder.from_settings(settings).titled(title or input_path.stem)
    if overflow:
        builder.overflow(overflow)

    with RecordStore.from_settings(InMemoryBackend(), settings) as store:
        record_types: list[type[Record]] = []
        for collection, documents in payload.items():
            if not isinstance(documents, list):
                console.print(f"[yellow]Skipping '{collection}': not a list[/yellow]")
                continue
            documents = [d for d in documents if isinstance(d, dict)]
            try:
                record_type = record_type_for(collection, documents)
            except PydanticUserError as e:
                console.print(f"[red]Cannot build a table for '{collection}': {e}[/red]")
                sys.exit(1)
            record_types.append(record_type)
            for i, doc in enumerate(documents, 1):
                try:
                    store.save(record_type.model_validate({**doc, "id": str(doc.get("id", i))}))
                except ValidationError as e:
                    console.print(f"[yellow]Skipping {collection}[{i}]: {e.errors()[0]['msg']}[/yellow]")

        batch = store.fetch_all_batched(record_types)

    page_count = builder.add_batch(batch).save(output)

    console.print(f"[green]✓[/green] Report written to [bold]{output}[/bold]")
    console.print(f"  Collections: {len(record_types)}  |  Pages: {page_count}")


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["rich", "json"]), default="rich")
def inspect(pdf_path: Path, output_format: str) -> None:
    """Show the tables stored in a report PDF."""
    from ..pdf.reader import ReportReader

    with ReportReader(pdf_path) as reader:
        summary = reader.summary()
        tables = reader.find_tables()

    if output_format == "json":
        output = {
            "file": str(pdf_path),
            "summary": summary,
            "tables": [t.model_dump(mode="json") for t in tables],
        }
        click.echo(json.dumps(output, indent=2))
        return

    console.print()
    console.print(Panel(
        f"[bold]{pdf_path.name}[/bold]\n"
        f"Pages: [cyan]{summary['page_count']}[/cyan]  |  "
        f"Table pages: [cyan]{summary['table_pages']}[/cyan]",
        title="Report Inspection",
        border_style="cyan",
    ))

    if tables:
        t = Table(title="Tables", box=box.ROUNDED)
        t.add_column("Page")
        t.add_column("Title")
        t.add_column("Part")
        t.add_column("Columns")
        t.add_column("Rows")
        t.add_column("Dropped")

        for info in tables:
            t.add_row(
                str((info.page_index or 0) + 1),
                f"[cyan]{info.title}[/cyan]",
                str(info.page_number),
                ", ".join(info.headers)[:40],
                f"{info.first_row + 1}–{info.first_row + info.row_count}" if info.row_count else "—",
                f"[red]{info.dropped_rows}[/red]" if info.dropped_rows else "—",
            )
        console.print(t)
    else:
        console.print("\n[yellow]No record tables found in this PDF.[/yellow]")
    console.print()


# ---------------------------------------------------------------------------
# version info
# ---------------------------------------------------------------------------


@cli.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(Panel(
        f"[bold cyan]record-report[/bold cyan] v{__version__}\n\n"
        "Typed records to paginated PDF tables\n"
        "Rendering: ReportLab  |  Document container: pikepdf",
        title="record-report",
        border_style="cyan",
    ))


if __name__ == "__main__":
    cli()
