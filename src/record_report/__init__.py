"""
record-report – Typed Records to Paginated PDF Tables
=======================================================
Store typed records in a document database and export them as tabular PDF
reports, one table per record collection.

Quick Start::

    from record_report import InMemoryBackend, Record, RecordStore, ReportBuilder, ReportReader

    class Todo(Record):
        collection_name = "todos"
        title: str
        done: bool = False

    with RecordStore(InMemoryBackend()) as store:
        store.save(Todo(id="1", title="Buy milk"))
        store.save(Todo(id="2", title="Call Sam"))
        batch = store.fetch_all_batched([Todo])

    pages = ReportBuilder().spill().add_batch(batch).save("report.pdf")

    # Read back
    with ReportReader("report.pdf") as reader:
        for table in reader.find_tables():
            print(table.title, table.row_count)
"""

__version__ = "0.1.0"

# Core models
from .models.record import (
    FieldDescriptor,
    HasFields,
    Identifiable,
    Record,
)
from .models.report import TableInfo

# Configuration and errors
from .config import OverflowPolicy, PageGeometry, ReportSettings, TableStyle
from .errors import (
    DatabaseError,
    EmptyFieldSet,
    ReportError,
    RowShapeMismatch,
    SurfaceCreationFailure,
    ZeroColumnLayout,
)

# Projection and rendering
from .projection.projector import RecordProjector, format_value
from .pdf.renderer import PlacedRow, RenderedPage, TableRenderer

# PDF I/O
from .pdf.writer import ReportDocument
from .pdf.reader import ReportReader

# Assembly
from .report.assembler import RecordSet, ReportAssembler
from .builder.report_builder import ReportBuilder

# Persistence
from .store.backend import DocumentBackend, InMemoryBackend
from .store.service import RecordStore

__all__ = [
    # Models
    "FieldDescriptor",
    "HasFields",
    "Identifiable",
    "Record",
    "TableInfo",
    # Configuration
    "OverflowPolicy",
    "PageGeometry",
    "ReportSettings",
    "TableStyle",
    # Errors
    "DatabaseError",
    "EmptyFieldSet",
    "ReportError",
    "RowShapeMismatch",
    "SurfaceCreationFailure",
    "ZeroColumnLayout",
    # Projection and rendering
    "RecordProjector",
    "format_value",
    "PlacedRow",
    "RenderedPage",
    "TableRenderer",
    # PDF I/O
    "ReportDocument",
    "ReportReader",
    # Assembly
    "RecordSet",
    "ReportAssembler",
    "ReportBuilder",
    # Persistence
    "DocumentBackend",
    "InMemoryBackend",
    "RecordStore",
]
