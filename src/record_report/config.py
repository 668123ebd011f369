"""
Settings
=========
Runtime configuration for report rendering and the record store.

Values come from keyword arguments or ``RECORD_REPORT_*`` environment
variables, e.g. ``RECORD_REPORT_OVERFLOW=spill``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OverflowPolicy(str, Enum):
    """
    What the renderer does when the next row does not fit on the page.

    TRUNCATE – stop filling; the remaining rows are dropped (logged).
    SPILL    – start a new page with the same title and header band.
    """
    TRUNCATE = "truncate"
    SPILL = "spill"


class PageGeometry(BaseModel):
    """Fixed page canvas, in PDF points."""
    model_config = ConfigDict(frozen=True)

    width: float = Field(595.0, gt=0)
    height: float = Field(842.0, gt=0)
    margin: float = Field(20.0, ge=0)

    @model_validator(mode="after")
    def _margin_fits(self) -> "PageGeometry":
        if self.margin * 2 >= min(self.width, self.height):
            raise ValueError("margin leaves no drawable area on the page")
        return self

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        """Lowest y (measured from the top) that page content may reach."""
        return self.height - self.margin


class TableStyle(BaseModel):
    """Fonts and fixed bands of the table layout."""
    model_config = ConfigDict(frozen=True)

    title_font: str = "Helvetica-Bold"
    title_size: float = 20.0
    title_band: float = 30.0
    body_font: str = "Helvetica"
    body_size: float = 12.0
    header_height: float = 24.0
    cell_inset: float = 4.0
    min_row_height: float = 24.0
    line_spacing: float = 1.2

    @property
    def leading(self) -> float:
        return self.body_size * self.line_spacing


class ReportSettings(BaseSettings):
    """Top-level settings, read from ``RECORD_REPORT_*`` environment variables."""
    model_config = SettingsConfigDict(env_prefix="RECORD_REPORT_", extra="ignore")

    page_width: float = 595.0
    page_height: float = 842.0
    margin: float = 20.0
    title_font: str = "Helvetica-Bold"
    title_size: float = 20.0
    body_font: str = "Helvetica"
    body_size: float = 12.0
    overflow: OverflowPolicy = OverflowPolicy.TRUNCATE
    store_max_workers: int = Field(4, ge=1)
    log_level: str = "INFO"

    def geometry(self) -> PageGeometry:
        return PageGeometry(width=self.page_width, height=self.page_height, margin=self.margin)

    def table_style(self) -> TableStyle:
        return TableStyle(
            title_font=self.title_font,
            title_size=self.title_size,
            body_font=self.body_font,
            body_size=self.body_size,
        )
