"""
Table Renderer
===============
Lays out a titled grid of text on fixed-size PDF pages using ReportLab.

Each page carries the title, a bordered header band and as many bordered
data rows as fit above the bottom margin. Row height follows the tallest
word-wrapped cell. When the next row would cross the bottom margin the
overflow policy decides what happens:

- ``OverflowPolicy.TRUNCATE`` stops; the remaining rows are not rendered and
  the drop is logged and recorded on the last page (``dropped_rows``).
- ``OverflowPolicy.SPILL`` continues on a new page with the same title and
  header band.

All positions are measured from the top-left corner of the page, in points.

Example::

    from record_report.pdf.renderer import TableRenderer
    from record_report.config import OverflowPolicy

    renderer = TableRenderer(overflow=OverflowPolicy.SPILL)
    pages = renderer.render_table("todos", ["id", "title"], [["1", "Buy milk"]])
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from reportlab.pdfgen import canvas

from ..config import OverflowPolicy, PageGeometry, ReportSettings, TableStyle
from ..errors import SurfaceCreationFailure, ZeroColumnLayout
from .layout import row_height, wrap_text

logger = logging.getLogger(__name__)

CanvasFactory = Callable[[io.BytesIO, tuple[float, float]], Any]


def _default_canvas(buffer: io.BytesIO, pagesize: tuple[float, float]) -> canvas.Canvas:
    # invariant=1 keeps timestamps and document ids out of the output
    return canvas.Canvas(buffer, pagesize=pagesize, invariant=1)


# ---------------------------------------------------------------------------
# Layout results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlacedRow:
    """A data row placed on a page."""
    index: int
    top: float
    height: float
    cells: tuple[str, ...]

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class RenderedPage:
    """One finished page of a table. Never mutated after rendering."""
    title: str
    headers: tuple[str, ...]
    column_width: float
    header_top: float
    rows: tuple[PlacedRow, ...]
    page_number: int = 1
    dropped_rows: int = 0
    pdf_bytes: bytes = field(default=b"", repr=False, compare=False)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def row_indices(self) -> list[int]:
        return [r.index for r in self.rows]


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

class TableRenderer:
    """
    Stateless table-to-pages renderer.

    Parameters
    ----------
    geometry:
        Page size and margin. Defaults to A4 portrait (595 x 842) with a 20pt margin.
    style:
        Fonts and fixed band heights.
    overflow:
        What to do with rows that do not fit on the current page.
    canvas_factory:
        Creates the drawing surface for one page from an output buffer and a
        page size. Defaults to a ReportLab canvas.
    """

    def __init__(
        self,
        geometry: PageGeometry | None = None,
        style: TableStyle | None = None,
        *,
        overflow: OverflowPolicy = OverflowPolicy.TRUNCATE,
        canvas_factory: CanvasFactory | None = None,
    ) -> None:
        self.geometry = geometry or PageGeometry()
        self.style = style or TableStyle()
        self.overflow = OverflowPolicy(overflow)
        self._canvas_factory = canvas_factory or _default_canvas

    @classmethod
    def from_settings(cls, settings: ReportSettings, **kwargs: Any) -> "TableRenderer":
        kwargs.setdefault("overflow", settings.overflow)
        return cls(settings.geometry(), settings.table_style(), **kwargs)

    @property
    def header_top(self) -> float:
        return self.geometry.margin + self.style.title_band

    @property
    def body_top(self) -> float:
        return self.header_top + self.style.header_height

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_table(
        self,
        title: str,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> list[RenderedPage]:
        """
        Lay out and draw a table.

        Returns one page under ``TRUNCATE`` and one or more pages under
        ``SPILL``.

        Raises
        ------
        ZeroColumnLayout
            ``headers`` is empty.
        SurfaceCreationFailure
            A page canvas could not be created.
        """
        return [
            replace(page, pdf_bytes=self._draw(page))
            for page in self.layout(title, headers, rows)
        ]

    def layout(
        self,
        title: str,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> list[RenderedPage]:
        """Compute page placement without drawing (``pdf_bytes`` left empty)."""
        if not headers:
            raise ZeroColumnLayout(title)

        geometry = self.geometry
        headers = tuple(headers)
        column_width = geometry.content_width / len(headers)

        pages: list[RenderedPage] = []
        placed: list[PlacedRow] = []
        cursor = self.body_top
        dropped = 0

        def close_page() -> None:
            pages.append(RenderedPage(
                title=title,
                headers=headers,
                column_width=column_width,
                header_top=self.header_top,
                rows=tuple(placed),
                page_number=len(pages) + 1,
                dropped_rows=dropped,
            ))

        for index, row in enumerate(rows):
            height = row_height(row, column_width, self.style)

            if cursor + height > geometry.bottom_limit:
                if self.overflow is OverflowPolicy.TRUNCATE:
                    dropped = len(rows) - index
                    logger.warning(
                        "Table '%s': %d of %d row(s) do not fit on the page and were dropped",
                        title, dropped, len(rows),
                    )
                    break
                if placed:
                    close_page()
                    placed = []
                    cursor = self.body_top
                if cursor + height > geometry.bottom_limit:
                    logger.warning(
                        "Table '%s': row %d is %.0fpt tall and is clipped at the page bottom",
                        title, index, height,
                    )

            placed.append(PlacedRow(index=index, top=cursor, height=height, cells=tuple(row)))
            cursor += height

        close_page()
        logger.debug("Laid out table '%s' on %d page(s)", title, len(pages))
        return pages

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    @contextmanager
    def _surface(self) -> Iterator[tuple[Any, io.BytesIO]]:
        """Exclusive drawing surface for one page, released on exit."""
        buffer = io.BytesIO()
        try:
            try:
                surface = self._canvas_factory(
                    buffer, (self.geometry.width, self.geometry.height)
                )
            except Exception as exc:
                raise SurfaceCreationFailure(
                    f"could not create a {self.geometry.width:g}x{self.geometry.height:g} "
                    f"canvas: {exc}"
                ) from exc
            yield surface, buffer
        finally:
            buffer.close()

    def _draw(self, page: RenderedPage) -> bytes:
        geometry, style = self.geometry, self.style
        with self._surface() as (surface, buffer):
            surface.setTitle(page.title)
            surface.setLineWidth(0.5)

            surface.setFont(style.title_font, style.title_size)
            surface.drawString(
                geometry.margin,
                geometry.height - geometry.margin - style.title_size,
                page.title,
            )

            for col, header in enumerate(page.headers):
                self._draw_cell(
                    surface,
                    geometry.margin + col * page.column_width,
                    page.header_top,
                    page.column_width,
                    style.header_height,
                    header,
                )

            for row in page.rows:
                for col, cell in enumerate(row.cells):
                    self._draw_cell(
                        surface,
                        geometry.margin + col * page.column_width,
                        row.top,
                        page.column_width,
                        row.height,
                        cell,
                    )

            surface.showPage()
            surface.save()
            return buffer.getvalue()

    def _draw_cell(
        self,
        surface: Any,
        x: float,
        top: float,
        width: float,
        height: float,
        text: str,
    ) -> None:
        style = self.style
        inset = style.cell_inset
        y = self.geometry.height - top - height
        surface.rect(x, y, width, height, stroke=1, fill=0)

        lines = wrap_text(text, style.body_font, style.body_size, width - 2 * inset)
        if not lines:
            return

        surface.saveState()
        clip = surface.beginPath()
        clip.rect(x + inset, y + inset, width - 2 * inset, height - 2 * inset)
        surface.clipPath(clip, stroke=0, fill=0)
        text_obj = surface.beginText(x + inset, self.geometry.height - top - inset - style.body_size)
        text_obj.setFont(style.body_font, style.body_size, leading=style.leading)
        for line in lines:
            text_obj.textLine(line)
        surface.drawText(text_obj)
        surface.restoreState()
