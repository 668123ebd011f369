"""
Report Table Metadata
======================
Per-page description of the table a report page shows.

Every page the report document receives carries a ``/RecordTable``
dictionary so a saved report can be inspected without re-running the export:

    << /Type /RecordTable
       /Title (todos)
       /Headers [(id) (title)]
       /PageNumber 1
       /FirstRow 0
       /RowCount 2
       /DroppedRows 0 >>
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TableInfo(BaseModel):
    """Description of the table slice shown on one report page."""
    model_config = ConfigDict(frozen=True)

    title: str
    headers: list[str] = Field(default_factory=list)
    page_number: int = Field(1, ge=1, description="1-based page number within the table")
    first_row: int = Field(0, ge=0, description="Index of the first record shown on this page")
    row_count: int = Field(0, ge=0)
    dropped_rows: int = Field(0, ge=0, description="Rows cut off after this page")
    page_index: int | None = Field(None, description="0-based position in the document")

    @classmethod
    def from_page(cls, page: Any, page_index: int | None = None) -> "TableInfo":
        """Build from a :class:`~record_report.pdf.renderer.RenderedPage`."""
        return cls(
            title=page.title,
            headers=list(page.headers),
            page_number=page.page_number,
            first_row=page.rows[0].index if page.rows else 0,
            row_count=page.row_count,
            dropped_rows=page.dropped_rows,
            page_index=page_index,
        )

    def is_truncated(self) -> bool:
        return self.dropped_rows > 0

    def to_pdf_dict(self) -> dict[str, Any]:
        """Serialize to a flat dict suitable for PDF dictionary entries."""
        return {
            "Type": "RecordTable",
            "Title": self.title,
            "Headers": list(self.headers),
            "PageNumber": self.page_number,
            "FirstRow": self.first_row,
            "RowCount": self.row_count,
            "DroppedRows": self.dropped_rows,
        }
