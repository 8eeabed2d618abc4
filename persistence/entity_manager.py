"""
persistence/entity_manager.py
-----------------------------
CRUD façade over a data source for a fixed set of entity classes.

Classes are validated once, when the manager is created. Database failures
are logged and turned into empty results; validation failures raise.
"""

import dataclasses
import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, TypeVar

import psycopg2

from db.connection import DataSource
from db.named_statement import NamedPreparedStatement
from persistence.annotations import ID
from persistence import mapping, reflection, sql_generator
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DB_ERRORS = (psycopg2.Error, sqlite3.Error)


class EntityManager(ABC):
    """Typed CRUD contract for persistent classes."""

    @abstractmethod
    def find(self, entity_class: type[T], id: Any) -> Optional[T]:
        """Fetch the entity with the given identity, or None."""

    @abstractmethod
    def find_all(self, entity_class: type[T]) -> list[T]:
        """Fetch every row of the entity's table."""

    @abstractmethod
    def save(self, entity: T) -> Optional[T]:
        """Insert the entity and set its generated identity. None on failure."""

    @abstractmethod
    def delete(self, entity: Any) -> bool:
        """Delete the entity by identity. True if a row was removed."""


class BasicEntityManager(EntityManager):
    """EntityManager running generated SQL through NamedPreparedStatement."""

    def __init__(self, data_source: DataSource, persistent_classes: Iterable[type]):
        self.data_source = data_source
        self.persistent_classes = frozenset(persistent_classes)

    @classmethod
    def create(cls, data_source: DataSource, persistent_classes: Iterable[type]) -> "BasicEntityManager":
        """
        Create a manager after checking every persistent class.

        Args:
            data_source: Where connections come from.
            persistent_classes: The classes this manager handles.

        Raises:
            ValueError: If a class is not an @entity dataclass with exactly
                one identity field.
        """
        classes = set(persistent_classes)
        check_persistent_classes(classes)
        logger.info(f"Managing entities: {', '.join(sorted(c.__name__ for c in classes))}")
        return cls(data_source, classes)

    def _check_managed(self, entity_class: type) -> None:
        if entity_class not in self.persistent_classes:
            raise ValueError(
                f"The class {entity_class.__qualname__} is not managed by this EntityManager"
            )

    # ── READ ──────────────────────────────────────────────

    def find(self, entity_class: type[T], id: Any) -> Optional[T]:
        self._check_managed(entity_class)
        id_field = reflection.get_field_declaring(entity_class, ID)
        sql = sql_generator.generate_select_sql(entity_class, id_field)
        result = self._execute_query(entity_class, sql, {id_field.name: id})
        return result[0] if result else None

    def find_all(self, entity_class: type[T]) -> list[T]:
        self._check_managed(entity_class)
        return self._execute_query(entity_class, sql_generator.generate_select_sql(entity_class), {})

    # ── CREATE ────────────────────────────────────────────

    def save(self, entity: T) -> Optional[T]:
        entity_class = type(entity)
        self._check_managed(entity_class)
        id_field = reflection.get_field_declaring(entity_class, ID)
        sql = sql_generator.generate_insert_sql(entity_class)
        try:
            statement = NamedPreparedStatement.prepare(self.data_source, sql)
            statement.set_parameters(mapping.entity_to_params(entity))
            new_id = statement.execute_insert(sql_generator.get_column_name_for_field(id_field))
        except DB_ERRORS as e:
            logger.error(f"Failed to save {entity_class.__name__}: {e}")
            return None
        reflection.set_value(id_field, entity, new_id)
        logger.info(f"Saved {entity_class.__name__} #{new_id}")
        return entity

    # ── DELETE ────────────────────────────────────────────

    def delete(self, entity: Any) -> bool:
        entity_class = type(entity)
        self._check_managed(entity_class)
        id_field = reflection.get_field_declaring(entity_class, ID)
        id_value = reflection.get_value(id_field, entity)
        if id_value is None:
            logger.error(f"Cannot delete {entity_class.__name__} without identity")
            return False
        deleted = self._execute_update(
            sql_generator.generate_delete_sql(entity_class), {id_field.name: id_value}
        ) > 0
        if deleted:
            logger.info(f"Deleted {entity_class.__name__} #{id_value}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    def _execute_query(self, entity_class: type[T], sql: str, parameters: dict) -> list[T]:
        try:
            statement = NamedPreparedStatement.prepare(self.data_source, sql)
            columns, rows = statement.set_parameters(parameters).execute_query()
        except DB_ERRORS as e:
            logger.error(f"Query failed for {entity_class.__name__}: {e}")
            return []
        return mapping.map_from_rows(entity_class, columns, rows)

    def _execute_update(self, sql: str, parameters: dict) -> int:
        try:
            statement = NamedPreparedStatement.prepare(self.data_source, sql)
            return statement.set_parameters(parameters).execute_update()
        except DB_ERRORS as e:
            logger.error(f"Update failed: {e}")
            return -1


def check_persistent_classes(persistent_classes: Iterable[type]) -> None:
    """
    Each class must be a dataclass annotated with @entity declaring exactly
    one identity field.

    Raises:
        ValueError: On the first class breaking a rule.
    """
    for cls in persistent_classes:
        if reflection.get_entity_info(cls) is None:
            raise ValueError(f"Illegal class {cls.__qualname__}: missing @entity")
        if not dataclasses.is_dataclass(cls):
            raise ValueError(f"Illegal class {cls.__qualname__}: not a dataclass")
        id_count = len(reflection.get_fields_declaring(cls, ID))
        if id_count != 1:
            raise ValueError(
                f"Illegal class {cls.__qualname__}: expected exactly one id field, found {id_count}"
            )
