"""
persistence/annotations.py
--------------------------
Class and field markers describing how a dataclass is persisted.

Example::

    @entity(table="people")
    @dataclass
    class Person:
        first_name: str = column(name="firstname")
        age: int = 0
        nickname: Optional[str] = transient(default=None)
        id: Optional[int] = id_field()
"""

import dataclasses
from dataclasses import dataclass
from typing import Any

ENTITY_ATTR = "__entity__"

# Keys stored in dataclasses.Field.metadata
COLUMN = "myorm.column"
ID = "myorm.id"
TRANSIENT = "myorm.transient"


@dataclass(frozen=True)
class EntityInfo:
    """Per-class mapping; an empty table means 'use the class name'."""
    table: str = ""


@dataclass(frozen=True)
class ColumnInfo:
    """Per-field mapping; an empty name means 'use the field name'."""
    name: str = ""


def entity(cls: type | None = None, *, table: str = "") -> Any:
    """
    Mark a class as persistable.

    Usable bare (``@entity``) or with arguments (``@entity(table="people")``).

    Args:
        cls: The decorated class.
        table: Table name override.
    """
    def decorator(cls: type) -> type:
        setattr(cls, ENTITY_ATTR, EntityInfo(table=table))
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def _field(extra: dict, field_kwargs: dict) -> Any:
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata.update(extra)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def column(name: str = "", **field_kwargs) -> Any:
    """A persisted field, optionally stored under another column name."""
    return _field({COLUMN: ColumnInfo(name=name)}, field_kwargs)


def id_field(name: str = "", **field_kwargs) -> Any:
    """The identity (primary key) field. Defaults to None until saved."""
    if "default" not in field_kwargs and "default_factory" not in field_kwargs:
        field_kwargs["default"] = None
    return _field({COLUMN: ColumnInfo(name=name), ID: True}, field_kwargs)


def transient(**field_kwargs) -> Any:
    """A field left out of every generated statement."""
    return _field({TRANSIENT: True}, field_kwargs)
