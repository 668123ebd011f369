"""
Record Projector
=================
Turns records into rows of display strings for the table renderer.

Headers are the record type's column names in declaration order; each row
holds one formatted string per header.

Formatting rules (:func:`format_value`):

- ``None`` (an absent optional) formats as the empty string.
- A present optional formats as its payload.
- A collection (list, tuple, set, ...; not a string, bytes or mapping) whose
  items all expose an ``id`` formats as the ids joined with ``", "``, in
  iteration order. This wins over plain stringification. Each id is formatted
  by the same rules, so an absent id is an empty entry.
- Enum members format as their value.
- Anything else formats as ``str(value)``; if that raises, ``repr(value)``,
  and failing that ``<TypeName>``. Formatting never raises.

Example::

    from record_report.projection.projector import RecordProjector

    headers, rows = RecordProjector().project(todos)
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from enum import Enum
from typing import Any

from ..errors import EmptyFieldSet, RowShapeMismatch
from ..models.record import FieldDescriptor, HasFields

logger = logging.getLogger(__name__)

_MISSING = object()


def format_value(value: Any) -> str:
    """Format one field value for display in a table cell."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_value(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, Collection) and not isinstance(value, (bytes, bytearray, Mapping)):
        ids = _identifiers(value)
        if ids is not None:
            return ", ".join(ids)
    return _safe_str(value)


def _identifiers(items: Collection[Any]) -> list[str] | None:
    """Ids of every item, or None if any item has no id."""
    ids: list[str] = []
    try:
        for item in items:
            ident = _identifier(item)
            if ident is _MISSING:
                return None
            ids.append(format_value(ident))
    except Exception:
        return None
    return ids


def _identifier(item: Any) -> Any:
    try:
        if isinstance(item, Mapping):
            return item.get("id", _MISSING)
        return getattr(item, "id", _MISSING)
    except Exception:
        return _MISSING


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


class RecordProjector:
    """Projects records of one type into a header set and rows of strings."""

    def headers_of(self, record: HasFields) -> list[str]:
        """Column names of ``record``, in declaration order."""
        return [f.name for f in self._fields_of(record)]

    def project_row(self, record: HasFields) -> list[str]:
        """One formatted string per column of ``record``."""
        return [format_value(f.read(record)) for f in self._fields_of(record)]

    def format_value(self, value: Any) -> str:
        return format_value(value)

    def project(self, records: Iterable[HasFields]) -> tuple[list[str], list[list[str]]]:
        """
        Project a homogeneous record collection.

        Returns ``([], [])`` for an empty collection; callers treat that as
        "nothing to render". Headers come from the first record.

        Raises
        ------
        EmptyFieldSet
            The record type has no columns.
        RowShapeMismatch
            A record yields a different number of values than there are headers.
        """
        records = list(records)
        if not records:
            return [], []

        headers = self.headers_of(records[0])
        rows: list[list[str]] = []
        for index, record in enumerate(records):
            row = self.project_row(record)
            if len(row) != len(headers):
                raise RowShapeMismatch(index, len(headers), len(row))
            rows.append(row)

        logger.debug("Projected %d row(s) x %d column(s)", len(rows), len(headers))
        return headers, rows

    @staticmethod
    def _fields_of(record: HasFields) -> tuple[FieldDescriptor, ...]:
        if not isinstance(record, HasFields):
            raise TypeError(
                f"{type(record).__name__} does not declare record fields; "
                "derive it from Record or implement record_fields()"
            )
        fields = type(record).record_fields()
        if not fields:
            raise EmptyFieldSet(type(record).__name__)
        return fields
