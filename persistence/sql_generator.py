"""
persistence/sql_generator.py
----------------------------
Derives table/column names from entity metadata and builds the SELECT,
INSERT and DELETE statements the entity manager runs.
All statements use ``:name`` placeholders keyed by field name.
"""

from dataclasses import Field

from persistence.annotations import COLUMN, ID
from persistence import reflection


def get_column_name_for_field(field: Field) -> str:
    """
    Column a field is stored in.

    Returns:
        The ``column(name=...)`` override, or the field name when none is given.
    """
    info = field.metadata.get(COLUMN)
    if info is None or not info.name:
        return field.name
    return info.name


def get_table_for_entity(cls: type) -> str:
    """
    Table an entity class maps to.

    Returns:
        The ``@entity(table=...)`` override, or the class name when none is given.
    """
    info = reflection.get_entity_info(cls)
    if info is None or not info.table:
        return cls.__name__
    return info.table


def generate_select_for_entity(cls: type) -> str:
    """Select list aliasing every persisted column to its field name."""
    return ", ".join(
        f"{get_column_name_for_field(f)} as {f.name}"
        for f in reflection.get_fields_without_transient(cls)
    )


def generate_select_sql(cls: type, *fields: Field) -> str:
    """
    SELECT over the entity's table, filtered by equality on the given fields.

    Example:
        ``SELECT id as id, firstname as first_name FROM people WHERE id = :id``
    """
    sql = f"SELECT {generate_select_for_entity(cls)} FROM {get_table_for_entity(cls)}"
    if fields:
        conditions = " AND ".join(f"{get_column_name_for_field(f)} = :{f.name}" for f in fields)
        sql += f" WHERE {conditions}"
    return sql


def generate_insert_sql(cls: type) -> str:
    """
    INSERT of every persisted field except the identity, which the database generates.

    An entity persisting nothing but its identity gets ``DEFAULT VALUES``.
    """
    fields = [f for f in reflection.get_fields_without_transient(cls) if not f.metadata.get(ID)]
    if not fields:
        return f"INSERT INTO {get_table_for_entity(cls)} DEFAULT VALUES"
    columns = ", ".join(get_column_name_for_field(f) for f in fields)
    values = ", ".join(f":{f.name}" for f in fields)
    return f"INSERT INTO {get_table_for_entity(cls)} ({columns}) VALUES ({values})"


def generate_delete_sql(cls: type) -> str:
    """DELETE by identity. Returns an empty string when the class has no identity field."""
    id_field = reflection.get_field_declaring(cls, ID)
    if id_field is None:
        return ""
    return (
        f"DELETE FROM {get_table_for_entity(cls)} "
        f"WHERE {get_column_name_for_field(id_field)} = :{id_field.name}"
    )
