"""
Record – Core Model
====================
Base model for every record type that can be stored and rendered as a table.

A record type is a Pydantic model with a stable ``id`` field. Its columns are
fixed when the class is defined: the declared fields, in declaration order,
unless the class narrows or reorders them with ``report_fields``. A field
declared with an alias appears under its alias. Each record
type also carries the collection name it is stored under, defaulting to the
class name.

Example::

    from record_report import Record

    class Todo(Record):
        collection_name = "todos"
        title: str
        done: bool = False

    Todo.record_fields()   # (FieldDescriptor('id', ...), FieldDescriptor('title', ...), ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from operator import attrgetter
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


# ---------------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldDescriptor:
    """A named column of a record type and how to read it from an instance."""
    name: str
    accessor: Callable[[Any], Any]

    def read(self, record: Any) -> Any:
        return self.accessor(record)


# Resolved once per record class, when the class is created.
_FIELD_REGISTRY: dict[type, tuple[FieldDescriptor, ...]] = {}


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

@runtime_checkable
class Identifiable(Protocol):
    """Anything exposing a stable ``id``."""

    @property
    def id(self) -> Any: ...


@runtime_checkable
class HasFields(Protocol):
    """A record that can enumerate its columns and names its collection."""

    collection_name: ClassVar[str]

    @classmethod
    def record_fields(cls) -> tuple[FieldDescriptor, ...]: ...


# ---------------------------------------------------------------------------
# Record base model
# ---------------------------------------------------------------------------

class Record(BaseModel):
    """
    Base class for storable, reportable records.

    Subclasses may set:

    collection_name:
        Collection key used by the record store and as the default report
        title. Defaults to the class name.
    report_fields:
        Explicit column names, in order. Defaults to every declared field.
    """
    model_config = ConfigDict(populate_by_name=True)

    collection_name: ClassVar[str] = "Record"
    report_fields: ClassVar[tuple[str, ...] | None] = None

    id: str = Field(..., min_length=1, description="Stable identifier, used as document id")

    _created_at: datetime = PrivateAttr(default_factory=lambda: datetime.now(tz=timezone.utc))

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if "collection_name" not in cls.__dict__:
            cls.collection_name = cls.__name__
        _FIELD_REGISTRY[cls] = _resolve_fields(cls)

    @classmethod
    def record_fields(cls) -> tuple[FieldDescriptor, ...]:
        """Columns of this record type, in declaration order."""
        fields = _FIELD_REGISTRY.get(cls)
        if fields is None:
            fields = _FIELD_REGISTRY[cls] = _resolve_fields(cls)
        return fields

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in cls.record_fields()]

    @property
    def created_at(self) -> datetime:
        """When this record object was constructed (not persisted, not a column)."""
        return self._created_at

    def to_document(self) -> dict[str, Any]:
        """JSON-compatible dict written to the document backend, keyed by alias."""
        return self.model_dump(mode="json", by_alias=True)


def _resolve_fields(cls: type[Record]) -> tuple[FieldDescriptor, ...]:
    names = cls.report_fields if cls.report_fields is not None else tuple(cls.model_fields)
    for name in names:
        if name not in cls.model_fields and not hasattr(cls, name):
            raise TypeError(f"{cls.__name__}.report_fields names unknown field '{name}'")
    return tuple(FieldDescriptor(_header_of(cls, name), attrgetter(name)) for name in names)


def _header_of(cls: type[Record], name: str) -> str:
    # Aliased fields are shown under their alias
    info = cls.model_fields.get(name)
    return info.alias if info is not None and info.alias else name
