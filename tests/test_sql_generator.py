# tests/test_sql_generator.py
# Table/column naming and statement generation from entity metadata

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.person import Person
from persistence import reflection
from persistence.annotations import ID, column, entity, id_field, transient
from persistence.sql_generator import (
    generate_delete_sql,
    generate_insert_sql,
    generate_select_for_entity,
    generate_select_sql,
    get_column_name_for_field,
    get_table_for_entity,
)


@entity
@dataclass
class Book:
    title: str
    isbn: str = column(name="")
    code: Optional[int] = id_field(name="book_code")


@dataclass
class NoId:
    name: str = ""


def test_table_name_uses_override_or_class_name():
    assert get_table_for_entity(Person) == "people"
    assert get_table_for_entity(Book) == "Book"
    assert get_table_for_entity(NoId) == "NoId"


def test_column_name_uses_override_or_field_name():
    first = reflection.get_field_by_name(Person, "first_name")
    age = reflection.get_field_by_name(Person, "age")
    isbn = reflection.get_field_by_name(Book, "isbn")
    assert get_column_name_for_field(first) == "firstname"
    assert get_column_name_for_field(age) == "age"
    # empty override falls back to the field name
    assert get_column_name_for_field(isbn) == "isbn"


def test_select_list_skips_transient_fields():
    assert generate_select_for_entity(Person) == (
        "firstname as first_name, lastname as last_name, age as age, id as id"
    )


def test_select_without_filter():
    assert generate_select_sql(Book) == (
        "SELECT title as title, isbn as isbn, book_code as code FROM Book"
    )


def test_select_filtered_by_fields():
    code = reflection.get_field_declaring(Book, ID)
    title = reflection.get_field_by_name(Book, "title")
    assert generate_select_sql(Book, code).endswith(" FROM Book WHERE book_code = :code")
    assert generate_select_sql(Book, code, title).endswith(
        " WHERE book_code = :code AND title = :title"
    )


def test_insert_excludes_identity_and_transient():
    assert generate_insert_sql(Person) == (
        "INSERT INTO people (firstname, lastname, age) "
        "VALUES (:first_name, :last_name, :age)"
    )


def test_delete_by_identity():
    assert generate_delete_sql(Person) == "DELETE FROM people WHERE id = :id"
    assert generate_delete_sql(Book) == "DELETE FROM Book WHERE book_code = :code"


def test_delete_without_identity_is_empty():
    assert generate_delete_sql(NoId) == ""


def test_transient_field_keeps_dataclass_default():
    @entity(table="t")
    @dataclass
    class Note:
        body: str = ""
        cached: int = transient(default=3)
        id: Optional[int] = id_field()

    assert Note().cached == 3
    assert "cached" not in generate_select_sql(Note)
    assert "cached" not in generate_insert_sql(Note)


def test_insert_for_identity_only_entity_uses_default_values():
    @entity(table="tokens")
    @dataclass
    class Token:
        id: Optional[int] = id_field()

    assert generate_insert_sql(Token) == "INSERT INTO tokens DEFAULT VALUES"
