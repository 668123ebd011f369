"""
Error Types
============
Exceptions raised by the projector, the renderer and the record store.

Projection and layout failures derive from :class:`ReportError` and are local
to one record set: the assembler logs them and skips that set. Store failures
surface as :class:`DatabaseError` and propagate to the caller unchanged.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for failures that only affect a single record set."""


class EmptyFieldSet(ReportError):
    """A record type exposes no enumerable fields."""

    def __init__(self, record_type: str) -> None:
        super().__init__(f"{record_type} exposes no fields to lay out as columns")
        self.record_type = record_type


class RowShapeMismatch(ReportError):
    """A projected row does not have one value per header."""

    def __init__(self, row_index: int, expected: int, actual: int) -> None:
        super().__init__(
            f"row {row_index} has {actual} value(s), expected {expected} (one per header)"
        )
        self.row_index = row_index
        self.expected = expected
        self.actual = actual


class ZeroColumnLayout(ReportError):
    """A table was rendered without any header."""

    def __init__(self, title: str) -> None:
        super().__init__(f"table '{title}' has no headers, column width is undefined")
        self.title = title


class SurfaceCreationFailure(ReportError):
    """The drawing canvas backing a page could not be created."""


class DatabaseError(Exception):
    """
    A document backend call failed.

    The backend's own exception is kept as ``__cause__``; the store never
    interprets or retries it.
    """

    def __init__(self, operation: str, collection: str, message: str) -> None:
        super().__init__(f"{operation} on '{collection}' failed: {message}")
        self.operation = operation
        self.collection = collection
