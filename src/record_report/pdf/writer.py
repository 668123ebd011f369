"""
Report Document
================
Collects rendered table pages into one PDF using pikepdf.

Each inserted page is tagged with a ``/RecordTable`` dictionary describing
the table slice it shows (see :mod:`record_report.models.report`).

Example::

    from record_report.pdf.writer import ReportDocument

    with ReportDocument() as doc:
        for index, page in enumerate(pages):
            doc.insert_page(page, index)
        doc.save("report.pdf")
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pikepdf

from ..models.report import TableInfo
from .renderer import RenderedPage

logger = logging.getLogger(__name__)


class ReportDocument:
    """
    Context-manager-based PDF document container for rendered pages.

    Usage::

        with ReportDocument() as doc:
            doc.insert_page(page, 0)
            doc.save("report.pdf")
    """

    GENERATOR = "record-report v0.1.0"

    def __init__(self, title: str | None = None) -> None:
        self.title = title
        self._pdf = pikepdf.new()
        # Source documents stay open until the container is saved and closed
        self._sources: list[pikepdf.Pdf] = []
        self._tables: list[TableInfo] = []

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "ReportDocument":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def close(self) -> None:
        for source in self._sources:
            source.close()
        self._sources.clear()
        self._pdf.close()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def insert_page(self, page: RenderedPage, index: int) -> pikepdf.Page:
        """
        Insert a rendered page at ``index`` (0-based).

        Raises
        ------
        ValueError
            The page carries no drawing.
        IndexError
            ``index`` is outside ``0..page_count``.
        """
        if not page.pdf_bytes:
            raise ValueError(f"page {page.page_number} of '{page.title}' has not been drawn")
        if not 0 <= index <= len(self._pdf.pages):
            raise IndexError(f"page index {index} out of range 0..{len(self._pdf.pages)}")

        source = pikepdf.open(io.BytesIO(page.pdf_bytes))
        self._sources.append(source)
        self._pdf.pages.insert(index, source.pages[0])

        info = TableInfo.from_page(page, page_index=index)
        inserted = self._pdf.pages[index]
        inserted.obj["/RecordTable"] = self._table_dict(info)
        self._tables.insert(index, info)

        logger.debug("Inserted page %d of '%s' at index %d", page.page_number, page.title, index)
        return inserted

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    @property
    def tables(self) -> list[TableInfo]:
        """Table metadata of every page, in document order."""
        return [t.model_copy(update={"page_index": i}) for i, t in enumerate(self._tables)]

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, output: str | Path, *, linearize: bool = False) -> None:
        """
        Save the document.

        Parameters
        ----------
        output:
            Output file path.
        linearize:
            If True, linearize (web-optimized) the output.
        """
        self._pdf.docinfo["/Producer"] = self.GENERATOR
        if self.title:
            self._pdf.docinfo["/Title"] = self.title

        options: dict[str, Any] = {}
        if linearize:
            options["linearize"] = True
        self._pdf.save(str(output), **options)
        logger.info("Saved report with %d page(s) to %s", self.page_count, output)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _table_dict(info: TableInfo) -> pikepdf.Dictionary:
        d = info.to_pdf_dict()
        return pikepdf.Dictionary(
            Type=pikepdf.Name(f"/{d['Type']}"),
            Title=pikepdf.String(d["Title"]),
            Headers=pikepdf.Array([pikepdf.String(h) for h in d["Headers"]]),
            PageNumber=d["PageNumber"],
            FirstRow=d["FirstRow"],
            RowCount=d["RowCount"],
            DroppedRows=d["DroppedRows"],
        )

    @property
    def pdf(self) -> pikepdf.Pdf:
        """Direct access to the underlying pikepdf.Pdf object."""
        return self._pdf
