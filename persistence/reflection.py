"""
persistence/reflection.py
-------------------------
Reflection helpers over annotated dataclasses.
"""

import dataclasses
from dataclasses import Field
from typing import Any, Optional

from persistence.annotations import ENTITY_ATTR, TRANSIENT, EntityInfo


def get_entity_info(cls: type) -> Optional[EntityInfo]:
    """The @entity marker declared on the class itself, if any."""
    return cls.__dict__.get(ENTITY_ATTR)


def get_fields(cls: type) -> list[Field]:
    """
    All dataclass fields of a class.

    Returns:
        Fields in declaration order, or an empty list for non-dataclasses.
    """
    if not dataclasses.is_dataclass(cls):
        return []
    return list(dataclasses.fields(cls))


def get_fields_declaring(cls: type, marker: str) -> list[Field]:
    """
    Fields carrying a metadata marker.

    Args:
        cls: The dataclass to inspect.
        marker: A metadata key from persistence.annotations (e.g. ``ID``).
    """
    return [f for f in get_fields(cls) if f.metadata.get(marker)]


def get_field_declaring(cls: type, marker: str) -> Optional[Field]:
    """First field carrying ``marker``, or None."""
    return next(iter(get_fields_declaring(cls, marker)), None)


def get_fields_without_transient(cls: type) -> list[Field]:
    """Fields that take part in generated SQL."""
    return [f for f in get_fields(cls) if not f.metadata.get(TRANSIENT)]


def get_field_by_name(cls: type, name: str) -> Optional[Field]:
    """
    Look up a field by attribute name.

    Returns:
        The matching Field or None if the class declares no such field.
    """
    return next((f for f in get_fields(cls) if f.name == name), None)


def get_value(field: Field, obj: Any) -> Any:
    return getattr(obj, field.name)


def set_value(field: Field, obj: Any, value: Any) -> None:
    # object.__setattr__ also works on frozen dataclasses
    object.__setattr__(obj, field.name, value)
