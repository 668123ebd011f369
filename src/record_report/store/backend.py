"""
Document Backends
==================
Storage interface the record store writes through, plus an in-memory
implementation used by the CLI and the tests.

A backend stores JSON-compatible documents under ``collection / id``. It
raises whatever its client raises; :class:`~record_report.store.service.RecordStore`
wraps those failures in :class:`~record_report.errors.DatabaseError`.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Protocol


class DocumentBackend(Protocol):
    """Minimal document-database client used by the record store."""

    def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = True) -> None:
        """Create or update ``collection/doc_id``; ``merge`` keeps fields not in ``data``."""

    def get_all(self, collection: str, order_by: str | None = None) -> list[dict[str, Any]]:
        """All documents of ``collection``, optionally sorted by one field."""

    def delete(self, collection: str, doc_id: str) -> None:
        """Remove ``collection/doc_id``; deleting a missing document is not an error."""


class InMemoryBackend:
    """Thread-safe dict-of-dicts backend."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = True) -> None:
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            doc = docs.get(doc_id, {}) if merge else {}
            docs[doc_id] = {**doc, **copy.deepcopy(data)}

    def get_all(self, collection: str, order_by: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            docs = [copy.deepcopy(d) for d in self._collections.get(collection, {}).values()]
        if order_by is None:
            return docs
        # Documents without the field sort last
        present = [d for d in docs if d.get(order_by) is not None]
        missing = [d for d in docs if d.get(order_by) is None]
        return sorted(present, key=lambda d: d[order_by]) + missing

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)

    def collections(self) -> list[str]:
        with self._lock:
            return list(self._collections)
