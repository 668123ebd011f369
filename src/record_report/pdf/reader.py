"""
Report Reader
==============
Reads the ``/RecordTable`` page metadata back out of a saved report.

Example::

    from record_report.pdf.reader import ReportReader

    with ReportReader("report.pdf") as reader:
        for table in reader.find_tables():
            print(table.page_index, table.title, table.row_count)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pikepdf

from ..models.report import TableInfo


class ReportReader:
    """Context-manager-based reader for record-report PDFs."""

    def __init__(self, source: str | Path) -> None:
        self._path = Path(source)
        self._pdf = pikepdf.open(str(source))

    def __enter__(self) -> "ReportReader":
        return self

    def __exit__(self, *_: Any) -> None:
        self._pdf.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def find_tables(self) -> list[TableInfo]:
        """Table metadata of every tagged page, in document order."""
        tables: list[TableInfo] = []
        for page_index, page in enumerate(self._pdf.pages):
            page_obj = page.obj
            if "/RecordTable" not in page_obj:
                continue
            info = self._parse_table(page_obj["/RecordTable"], page_index)
            if info:
                tables.append(info)
        return tables

    def summary(self) -> dict[str, Any]:
        """Return a summary of the report's tables."""
        tables = self.find_tables()
        per_title: dict[str, int] = {}
        for t in tables:
            per_title[t.title] = per_title.get(t.title, 0) + t.row_count
        return {
            "source": str(self._path),
            "page_count": self.page_count,
            "table_pages": len(tables),
            "rows_per_table": per_title,
            "truncated_tables": sorted({t.title for t in tables if t.is_truncated()}),
        }

    # ------------------------------------------------------------------
    # Internal parsers
    # ------------------------------------------------------------------

    def _parse_table(self, obj: pikepdf.Object, page_index: int) -> TableInfo | None:
        if not isinstance(obj, pikepdf.Dictionary):
            return None
        if obj.get("/Type") != pikepdf.Name("/RecordTable"):
            return None
        return TableInfo(
            title=str(obj.get("/Title", "")),
            headers=[str(h) for h in obj.get("/Headers", pikepdf.Array())],
            page_number=int(obj.get("/PageNumber", 1)),
            first_row=int(obj.get("/FirstRow", 0)),
            row_count=int(obj.get("/RowCount", 0)),
            dropped_rows=int(obj.get("/DroppedRows", 0)),
            page_index=page_index,
        )
