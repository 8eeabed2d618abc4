"""
persistence/mapping.py
----------------------
Conversion between entities and statement parameters / result rows.
"""

import dataclasses
from typing import Any, Sequence, TypeVar

from persistence.annotations import ID
from persistence import reflection
from persistence.sql_generator import get_column_name_for_field

T = TypeVar("T")


def entity_to_params(entity: Any) -> dict[str, Any]:
    """
    Collect the insert parameters of an entity.

    Returns:
        ``{field name: value}`` for every persisted, non-identity field.
    """
    return {
        f.name: reflection.get_value(f, entity)
        for f in reflection.get_fields_without_transient(type(entity))
        if not f.metadata.get(ID)
    }


def map_from_rows(cls: type[T], columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> list[T]:
    """
    Build one entity per result row.

    A result column matches a field by field name (the alias the generated
    SELECT uses) or by column name. Unmatched fields, transient ones included,
    keep their dataclass default, or None when they have none.

    Args:
        cls: The entity class.
        columns: Column names as reported by the cursor.
        rows: Result rows, positionally aligned with ``columns``.
    """
    lookup = {}
    for f in reflection.get_fields_without_transient(cls):
        lookup.setdefault(get_column_name_for_field(f).lower(), f)
    for f in reflection.get_fields_without_transient(cls):
        lookup[f.name.lower()] = f

    # Drivers may fold unquoted aliases to lower case
    targets = [lookup.get(c.lower()) for c in columns]
    return [_build(cls, targets, row) for row in rows]


def _build(cls: type[T], targets: list, row: Sequence[Any]) -> T:
    values = {f.name: value for f, value in zip(targets, row) if f is not None}
    kwargs = {}
    for f in reflection.get_fields(cls):
        if not f.init:
            continue
        if f.name in values:
            kwargs[f.name] = values[f.name]
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = None
    obj = cls(**kwargs)
    for f in reflection.get_fields(cls):
        if not f.init and f.name in values:
            reflection.set_value(f, obj, values[f.name])
    return obj
