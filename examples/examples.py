"""
Examples for record-report
===========================
Three complete examples: a single-page export, a long table that spills
across pages, and a batched export where one collection fails to load.

Run:
    python examples/examples.py
"""

from __future__ import annotations

import logging
import sys
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from record_report import (
    InMemoryBackend,
    Record,
    RecordProjector,
    RecordStore,
    ReportBuilder,
    ReportReader,
)


class Tag(Record):
    collection_name = "tags"
    label: str


class Status(str, Enum):
    OPEN = "open"
    DONE = "done"


class Todo(Record):
    collection_name = "todos"
    title: str
    due: str | None = None
    tags: list[Tag] = []
    status: Status = Status.OPEN


class Note(Record):
    collection_name = "notes"
    body: str


def _temp_pdf() -> Path:
    with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as f:
        return Path(f.name)


def _print_tables(pdf_path: Path) -> None:
    with ReportReader(pdf_path) as reader:
        for table in reader.find_tables():
            status = f"{table.dropped_rows} dropped" if table.is_truncated() else "complete"
            print(
                f"  page {table.page_index + 1}: '{table.title}' part {table.page_number}, "
                f"rows {table.first_row}..{table.first_row + table.row_count - 1} ({status})"
            )


# ---------------------------------------------------------------------------
# Example 1: Small export
# ---------------------------------------------------------------------------


def example_small_export() -> None:
    """
    Example 1: Two todos on one page.

    Columns follow field declaration order; the optional ``due`` renders as an
    empty cell and ``tags`` as the tag ids.
    """
    print("\n" + "="*60)
    print("EXAMPLE 1: Small export")
    print("="*60)

    todos = [
        Todo(id="1", title="Buy milk", tags=[Tag(id="home", label="Home")]),
        Todo(id="2", title="Call Sam", due="2025-01-15", status=Status.DONE),
    ]

    headers, rows = RecordProjector().project(todos)
    print(f"  Headers: {headers}")
    for row in rows:
        print(f"  Row:     {row}")

    pdf_path = _temp_pdf()
    pages = ReportBuilder().titled("Todos").add(todos).save(pdf_path)
    print(f"  Written: {pdf_path} ({pages} page)")
    _print_tables(pdf_path)


# ---------------------------------------------------------------------------
# Example 2: Overflow
# ---------------------------------------------------------------------------


def example_overflow() -> None:
    """
    Example 2: A table longer than a page.

    By default rows past the bottom margin are dropped and the drop is
    recorded on the page. With ``spill()`` the table continues on new pages
    under the same title and header band.
    """
    print("\n" + "="*60)
    print("EXAMPLE 2: Truncate vs. spill")
    print("="*60)

    notes = [
        Note(id=f"n{i:03}", body=("Meeting notes, item %d. " % i) * (1 + i % 4))
        for i in range(120)
    ]

    truncated = _temp_pdf()
    ReportBuilder().add(notes).save(truncated)
    print("  truncate:")
    _print_tables(truncated)

    spilled = _temp_pdf()
    pages = ReportBuilder().spill().add(notes).save(spilled)
    print(f"  spill ({pages} pages):")
    _print_tables(spilled)


# ---------------------------------------------------------------------------
# Example 3: Batched export with a failing collection
# ---------------------------------------------------------------------------


class FlakyBackend(InMemoryBackend):
    """In-memory backend whose ``notes`` collection is unreachable."""

    def get_all(self, collection: str, order_by: str | None = None) -> list[dict[str, Any]]:
        if collection == "notes":
            raise ConnectionError("notes replica unavailable")
        return super().get_all(collection, order_by)


def example_batched_export() -> None:
    """
    Example 3: Read several collections at once and export what loaded.

    Each collection's outcome is reported separately, so the todos still
    make it into the report when notes fail.
    """
    print("\n" + "="*60)
    print("EXAMPLE 3: Batched export")
    print("="*60)

    with RecordStore(FlakyBackend()) as store:
        store.save(Todo(id="1", title="Buy milk"))
        store.save(Todo(id="2", title="Call Sam"))
        store.save(Note(id="n1", body="unreachable"))
        batch = store.fetch_all_batched([Todo, Note])

    for collection, outcome in batch.items():
        if isinstance(outcome, Exception):
            print(f"  {collection}: failed ({outcome})")
        else:
            print(f"  {collection}: {len(outcome)} record(s)")

    pdf_path = _temp_pdf()
    pages = ReportBuilder().titled("Nightly export").add_batch(batch).save(pdf_path)
    print(f"  Written: {pdf_path} ({pages} page)")
    _print_tables(pdf_path)


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="  [%(levelname)s] %(message)s")
    example_small_export()
    example_overflow()
    example_batched_export()
    print()
