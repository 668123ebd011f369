"""
Report Assembler
=================
Turns named record sets into one PDF report, one table per set.

For each set: project the records to headers and rows, render the table,
and insert the resulting pages into the report document at the next free
index. Empty sets are skipped and do not use up an index. A set that cannot
be laid out (no columns, ragged rows, no drawing surface) is logged and
skipped; the rest of the report is still produced. A report can therefore
hold fewer tables than it was given, and under ``OverflowPolicy.TRUNCATE``
a table can show fewer rows than its set holds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from ..errors import ReportError
from ..models.record import HasFields
from ..pdf.renderer import TableRenderer
from ..pdf.writer import ReportDocument
from ..projection.projector import RecordProjector

logger = logging.getLogger(__name__)


@dataclass
class RecordSet:
    """Records of one type, rendered as one table."""
    records: Sequence[HasFields]
    title: str | None = None

    @property
    def resolved_title(self) -> str:
        """Explicit title, else the record type's collection name."""
        if self.title:
            return self.title
        if self.records:
            return type(self.records[0]).collection_name
        return ""


RecordSets = Union[
    Mapping[str, Sequence[HasFields]],
    Iterable[Union[RecordSet, Sequence[HasFields]]],
]


def as_record_sets(record_sets: RecordSets) -> list[RecordSet]:
    """Normalize a mapping, a list of RecordSets or a list of record lists."""
    if isinstance(record_sets, Mapping):
        return [RecordSet(list(records), title) for title, records in record_sets.items()]
    return [
        item if isinstance(item, RecordSet) else RecordSet(list(item))
        for item in record_sets
    ]


class ReportAssembler:
    """Projects, renders and collects record sets into a ReportDocument."""

    def __init__(
        self,
        renderer: TableRenderer | None = None,
        projector: RecordProjector | None = None,
    ) -> None:
        self.renderer = renderer or TableRenderer()
        self.projector = projector or RecordProjector()

    def assemble(
        self,
        record_sets: RecordSets,
        *,
        document: ReportDocument | None = None,
        title: str | None = None,
    ) -> ReportDocument:
        """
        Render every non-empty set into ``document`` (a new one by default).

        Pages are appended after any pages ``document`` already holds.
        """
        if document is None:
            document = ReportDocument(title)
        index = document.page_count

        for record_set in as_record_sets(record_sets):
            if not record_set.records:
                logger.info("Skipping empty record set '%s'", record_set.title or "")
                continue

            set_title = record_set.resolved_title
            try:
                headers, rows = self.projector.project(record_set.records)
                pages = self.renderer.render_table(set_title, headers, rows)
            except ReportError as exc:
                logger.warning("Skipping record set '%s': %s", set_title, exc)
                continue

            for page in pages:
                document.insert_page(page, index)
                index += 1

            logger.info(
                "Rendered '%s': %d record(s) on %d page(s)",
                set_title, len(record_set.records), len(pages),
            )

        return document
