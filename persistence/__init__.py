"""
persistence/ - Mapping Layer
============================
Annotations for persistable dataclasses, the reflection helpers reading them,
SQL generation, result mapping and the CRUD entity manager.
"""

from persistence.annotations import column, entity, id_field, transient
from persistence.entity_manager import BasicEntityManager, EntityManager

__all__ = [
    "entity",
    "column",
    "id_field",
    "transient",
    "EntityManager",
    "BasicEntityManager",
]
