"""Tests for recordmap.utils.naming."""

import pytest

from recordmap.utils.naming import (
    foreign_key_for,
    is_identifier,
    pivot_table_for,
    pluralize,
    snake_case,
    table_name_for,
)


@pytest.mark.parametrize(
    "name, expected",
    [("User", "user"), ("PostComment", "post_comment"), ("HTTPServer", "http_server"), ("role", "role")],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("user", "users"),
        ("category", "categories"),
        ("day", "days"),
        ("box", "boxes"),
        ("person", "people"),
        ("post_comment", "post_comments"),
    ],
)
def test_pluralize(word, expected):
    assert pluralize(word) == expected


def test_key_and_table_defaults():
    assert table_name_for("PostComment") == "post_comments"
    assert foreign_key_for("User") == "user_id"
    assert pivot_table_for("User", "Role") == pivot_table_for("Role", "User") == "role_user"


def test_is_identifier():
    assert is_identifier("email")
    assert is_identifier("users.email")
    assert is_identifier("users.*")
    assert is_identifier("*")
    assert not is_identifier("1abc")
    assert not is_identifier("a.b.c")
    assert not is_identifier("name; DROP TABLE users")
