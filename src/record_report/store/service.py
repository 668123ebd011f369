"""
Record Store
=============
Typed access to a document backend for :class:`~record_report.models.record.Record`
types.

Saves and deletes are exclusive; reads run concurrently with each other.
``fetch_all_batched`` reads several collections in parallel and reports
each collection's outcome separately, so one failing collection does not
fail the batch.

The store is an ordinary object: construct one at startup and pass it to
whatever needs it.

Example::

    from record_report import InMemoryBackend, RecordStore

    with RecordStore(InMemoryBackend()) as store:
        store.save(Todo(id="1", title="Buy milk"))
        todos = store.fetch_all(Todo, order_by="title")
        batch = store.fetch_all_batched([Todo, Note])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, TypeVar

from ..config import ReportSettings
from ..errors import DatabaseError
from ..models.record import Record
from .backend import DocumentBackend
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)
T = TypeVar("T")


class RecordStore:
    """Serialized writes, concurrent reads, over one document backend."""

    def __init__(self, backend: DocumentBackend, *, max_workers: int = 4) -> None:
        self._backend = backend
        self._lock = ReadWriteLock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="record-store")

    @classmethod
    def from_settings(cls, backend: DocumentBackend, settings: ReportSettings) -> "RecordStore":
        return cls(backend, max_workers=settings.store_max_workers)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record: Record) -> None:
        """Write ``record`` under its collection, merged into any existing document."""
        collection = type(record).collection_name
        with self._lock.write():
            self._call(
                "save", collection,
                lambda: self._backend.set(collection, record.id, record.to_document(), merge=True),
            )
        logger.debug("Saved %s/%s", collection, record.id)

    def delete(self, record_type: type[Record], record_id: str) -> None:
        collection = record_type.collection_name
        with self._lock.write():
            self._call("delete", collection, lambda: self._backend.delete(collection, record_id))
        logger.debug("Deleted %s/%s", collection, record_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_all(self, record_type: type[R], order_by: str | None = None) -> list[R]:
        """All records of ``record_type``, optionally ordered by one field."""
        collection = record_type.collection_name
        with self._lock.read():
            return self._call(
                "fetch", collection,
                lambda: [
                    record_type.model_validate(doc)
                    for doc in self._backend.get_all(collection, order_by)
                ],
            )

    def fetch_all_batched(
        self,
        record_types: Sequence[type[Record]],
    ) -> dict[str, list[Record] | DatabaseError]:
        """
        Fetch several collections concurrently.

        Returns a mapping of collection name to either its records or the
        :class:`DatabaseError` that collection failed with, in the order the
        types were given.
        """
        futures = {
            self._executor.submit(self.fetch_all, record_type): record_type.collection_name
            for record_type in record_types
        }

        outcomes: dict[str, list[Record] | DatabaseError] = {}
        for future in as_completed(futures):
            collection = futures[future]
            try:
                outcomes[collection] = future.result()
            except DatabaseError as exc:
                logger.warning("Batched fetch of '%s' failed: %s", collection, exc)
                outcomes[collection] = exc

        return {t.collection_name: outcomes[t.collection_name] for t in record_types}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _call(operation: str, collection: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            logger.error("%s on '%s' failed: %s", operation, collection, exc)
            raise DatabaseError(operation, collection, str(exc)) from exc
