"""
models/person.py
----------------
Example entity mapped to the `people` table.
"""

from dataclasses import dataclass
from typing import Optional

from persistence.annotations import column, entity, id_field, transient


@entity(table="people")
@dataclass
class Person:
    """
    A person record.

    Attributes:
        first_name: Stored in the `firstname` column.
        last_name: Stored in the `lastname` column.
        age: Age in years.
        nickname: Display-only, never persisted.
        id: Database primary key (None for new records).
    """
    first_name: str = column(name="firstname")
    last_name: str = column(name="lastname")
    age: int = 0
    nickname: Optional[str] = transient(default=None)
    id: Optional[int] = id_field()

    def __str__(self) -> str:
        return f"#{self.id} {self.first_name} {self.last_name} ({self.age})"
