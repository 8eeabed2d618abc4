# tests/test_mapping.py
# Entity <-> parameter / row conversion

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from models.person import Person
from persistence.annotations import entity, id_field
from persistence.mapping import entity_to_params, map_from_rows


def test_entity_to_params_skips_identity_and_transient():
    person = Person(first_name="Grace", last_name="Hopper", age=85, nickname="Amazing Grace", id=9)
    assert entity_to_params(person) == {"first_name": "Grace", "last_name": "Hopper", "age": 85}


def test_rows_matched_by_field_alias():
    people = map_from_rows(
        Person,
        ["first_name", "last_name", "age", "id"],
        [("Ada", "Lovelace", 36, 1), ("Alan", "Turing", 41, 2)],
    )
    assert people == [
        Person(first_name="Ada", last_name="Lovelace", age=36, id=1),
        Person(first_name="Alan", last_name="Turing", age=41, id=2),
    ]


def test_rows_matched_by_column_name_and_case():
    [person] = map_from_rows(Person, ["ID", "FIRSTNAME", "lastname", "unknown"], [(3, "Ada", "L", "x")])
    assert person.id == 3
    assert person.first_name == "Ada"
    assert person.last_name == "L"
    assert person.age == 0
    assert person.nickname is None


def test_no_rows_gives_empty_list():
    assert map_from_rows(Person, ["id"], []) == []


def test_non_init_fields_are_set_after_construction():
    @entity
    @dataclass
    class Counter:
        label: str = ""
        hits: int = field(default=0, init=False)
        id: Optional[int] = id_field()

    [counter] = map_from_rows(Counter, ["label", "hits", "id"], [("home", 12, 5)])
    assert counter.hits == 12
    assert counter.id == 5
