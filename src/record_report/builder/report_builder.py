"""
Report Builder
===============
Fluent builder API for assembling record sets into a PDF report.

Example::

    from record_report import ReportBuilder

    document = (
        ReportBuilder()
        .titled("Weekly export")
        .spill()
        .add(todos)
        .add(notes, title="Notes")
        .build()
    )
    document.save("report.pdf")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..config import OverflowPolicy, PageGeometry, ReportSettings, TableStyle
from ..errors import DatabaseError
from ..models.record import HasFields
from ..pdf.renderer import TableRenderer
from ..pdf.writer import ReportDocument
from ..report.assembler import RecordSet, ReportAssembler

logger = logging.getLogger(__name__)


class ReportBuilder:
    """
    Fluent builder for report documents.

    Typically instantiated directly, or via :meth:`from_settings` to pick up
    ``RECORD_REPORT_*`` configuration.
    """

    def __init__(self) -> None:
        self._title: str | None = None
        self._sets: list[RecordSet] = []
        self._overflow: OverflowPolicy = OverflowPolicy.TRUNCATE
        self._geometry: PageGeometry | None = None
        self._style: TableStyle | None = None

    @classmethod
    def from_settings(cls, settings: ReportSettings | None = None) -> "ReportBuilder":
        settings = settings or ReportSettings()
        b = cls()
        b._overflow = settings.overflow
        b._geometry = settings.geometry()
        b._style = settings.table_style()
        return b

    # ------------------------------------------------------------------
    # Builder chain methods
    # ------------------------------------------------------------------

    def titled(self, title: str) -> "ReportBuilder":
        """Document title, written to the PDF document info."""
        self._title = title
        return self

    def add(self, records: Sequence[HasFields], title: str | None = None) -> "ReportBuilder":
        """
        Add one record set. ``title`` defaults to the record type's collection
        name. Empty sets are accepted and skipped at build time.
        """
        self._sets.append(RecordSet(list(records), title))
        return self

    def add_batch(
        self,
        batch: Mapping[str, Sequence[HasFields] | DatabaseError],
    ) -> "ReportBuilder":
        """
        Add the result of :meth:`RecordStore.fetch_all_batched`. Collections
        that failed to load are logged and left out.
        """
        for collection, outcome in batch.items():
            if isinstance(outcome, DatabaseError):
                logger.warning("Leaving '%s' out of the report: %s", collection, outcome)
                continue
            self.add(outcome, title=collection)
        return self

    # --- Layout ---

    def overflow(self, policy: OverflowPolicy | str) -> "ReportBuilder":
        self._overflow = OverflowPolicy(policy)
        return self

    def truncate(self) -> "ReportBuilder":
        """Drop rows that do not fit on a table's single page."""
        return self.overflow(OverflowPolicy.TRUNCATE)

    def spill(self) -> "ReportBuilder":
        """Continue tables on new pages when they do not fit."""
        return self.overflow(OverflowPolicy.SPILL)

    def page(self, width: float, height: float, margin: float = 20.0) -> "ReportBuilder":
        self._geometry = PageGeometry(width=width, height=height, margin=margin)
        return self

    def style(self, style: TableStyle) -> "ReportBuilder":
        self._style = style
        return self

    # --- Build ---

    def renderer(self) -> TableRenderer:
        return TableRenderer(self._geometry, self._style, overflow=self._overflow)

    def build(self) -> ReportDocument:
        """Render all sets and return the (open) report document."""
        assembler = ReportAssembler(self.renderer())
        return assembler.assemble(self._sets, title=self._title)

    def save(self, output: str | Path) -> int:
        """Build, save to ``output`` and close. Returns the page count."""
        with self.build() as document:
            document.save(output)
            return document.page_count
