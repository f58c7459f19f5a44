"""Tests for recordmap.query: SQL compilation and bindings, before anything is executed."""

import pytest

from recordmap.errors import ValidationError
from recordmap.expressions import ColumnExpression
from recordmap.query import Query, normalize_operator

from tests.helpers import Post, User


class TestPredicates:
    """where() forms and their placeholders."""

    def test_two_argument_form_equals_explicit_equality(self, connection):
        short = User.q(connection).where("email", "a@b.c")
        explicit = User.q(connection).where("email", "=", "a@b.c")
        assert short.to_sql() == explicit.to_sql() == "SELECT * FROM users WHERE (email = ?)"
        assert short.get_bindings() == explicit.get_bindings() == ["a@b.c"]

    def test_chain_keeps_call_order(self, connection):
        query = (
            User.q(connection)
            .where("is_active", True)
            .where("age", ">=", 18)
            .order_by("name")
            .limit(5)
        )
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (is_active = ?) AND (age >= ?) ORDER BY name ASC LIMIT 5"
        )
        assert query.get_bindings() == [True, 18]

    def test_or_where_and_groups(self, connection):
        query = User.q(connection).where("age", ">", 18).where(
            lambda q: q.where("name", "Ann").or_where("name", "Bob")
        )
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (age > ?) AND ((name = ?) OR (name = ?))"
        )
        assert query.get_bindings() == [18, "Ann", "Bob"]

    def test_none_becomes_is_null(self, connection):
        query = User.q(connection).where("email", None).where("name", "!=", None)
        assert query.to_sql() == "SELECT * FROM users WHERE (email IS NULL) AND (name IS NOT NULL)"
        assert query.get_bindings() == []

    def test_dict_form(self, connection):
        query = User.q(connection).where({"name": "Ann", "age": 30})
        assert query.to_sql() == "SELECT * FROM users WHERE (name = ?) AND (age = ?)"
        assert query.get_bindings() == ["Ann", 30]

    def test_where_in_and_empty_lists(self, connection):
        query = User.q(connection).where_in("id", [1, 2, 3])
        assert query.to_sql() == "SELECT * FROM users WHERE (id IN (?, ?, ?))"
        assert query.get_bindings() == [1, 2, 3]
        assert User.q(connection).where_in("id", []).to_sql() == "SELECT * FROM users WHERE (1 = 0)"
        assert User.q(connection).where_not_in("id", []).to_sql() == "SELECT * FROM users WHERE (1 = 1)"

    def test_between_like_null(self, connection):
        query = (
            User.q(connection)
            .where_between("age", 18, 65)
            .where_like("email", "%@example.com")
            .where_not_null("name")
        )
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (age BETWEEN ? AND ?) AND (email LIKE ?) AND (name IS NOT NULL)"
        )
        assert query.get_bindings() == [18, 65, "%@example.com"]

    def test_where_raw_is_parenthesised(self, connection):
        query = User.q(connection).where_raw("age > ? OR age < ?", [60, 18])
        assert query.to_sql() == "SELECT * FROM users WHERE (age > ? OR age < ?)"
        assert query.get_bindings() == [60, 18]

    def test_where_year_uses_dialect_function(self, connection):
        query = User.q(connection).where_year("created_at", 2024)
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (CAST(strftime('%Y', created_at) AS INTEGER) = ?)"
        )
        assert query.get_bindings() == [2024]

    def test_expression_predicate(self, connection):
        query = User.q(connection).where(ColumnExpression("age").between(1, 2))
        assert query.to_sql() == "SELECT * FROM users WHERE (age BETWEEN ? AND ?)"

    def test_bindings_match_placeholders(self, connection):
        query = (
            User.q(connection)
            .select("name")
            .where("age", ">", 1)
            .where_in("id", [4, 5])
            .where_raw("name <> ?", ["x"])
            .group_by("name")
            .having("name", "!=", "y")
        )
        assert query.to_sql().count("?") == len(query.get_bindings()) == 5


class TestValidation:
    """Malformed input raises ValidationError before any SQL."""

    @pytest.mark.parametrize("operator", ["==", "; DROP", "IN", 3])
    def test_unknown_operator(self, connection, operator):
        with pytest.raises(ValidationError):
            User.q(connection).where("age", operator, 1)

    def test_operator_is_normalized(self):
        assert normalize_operator(" not   like ") == "NOT LIKE"

    def test_bad_direction(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).order_by("name", "sideways")

    def test_bad_identifier(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).where("age; DROP TABLE users", 1)
        with pytest.raises(ValidationError):
            Query(connection=connection, table="users; --")

    def test_negative_limit(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).limit(-1)

    def test_trashed_modes_need_soft_delete(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).with_trashed()

    @pytest.mark.parametrize("boolean", ["XOR", "AND; DROP TABLE users", None])
    def test_bad_boolean_connector(self, connection, boolean):
        query = Query(connection=connection, table="posts").group_by("user_id")
        with pytest.raises(ValidationError):
            query.having("user_id", ">", 1, boolean=boolean)
        with pytest.raises(ValidationError):
            query.having_raw("COUNT(*) > ?", [1], boolean=boolean)
        with pytest.raises(ValidationError):
            query.where("user_id", 1, boolean=boolean)
        assert not query.having_conditions

    def test_union_and_exists_need_a_query(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).union("SELECT * FROM users")
        with pytest.raises(ValidationError):
            User.q(connection).where_exists("SELECT 1")

    def test_unknown_scope(self, connection):
        with pytest.raises(ValidationError):
            User.q(connection).scope("nope")


class TestSoftDeleteFilter:
    """Soft-delete mode is rendered ahead of the caller's predicates."""

    def test_default_excludes_trashed(self, connection):
        assert Post.q(connection).to_sql() == "SELECT * FROM posts WHERE (posts.deleted_at IS NULL)"

    def test_caller_predicates_are_grouped(self, connection):
        query = Post.q(connection).where("title", "a").or_where("title", "b")
        assert query.to_sql() == (
            "SELECT * FROM posts WHERE (posts.deleted_at IS NULL) AND ((title = ?) OR (title = ?))"
        )

    def test_only_and_with_trashed(self, connection):
        assert Post.q(connection).only_trashed().to_sql() == (
            "SELECT * FROM posts WHERE (posts.deleted_at IS NOT NULL)"
        )
        assert Post.q(connection).with_trashed().to_sql() == "SELECT * FROM posts"


class TestShaping:
    """select, joins, grouping, offsets, diagnostics."""

    def test_join_selects_main_table(self, connection):
        query = User.q(connection).join("posts", "posts.user_id", "users.id").where("posts.title", "x")
        assert query.to_sql() == (
            "SELECT users.* FROM users INNER JOIN posts ON posts.user_id = users.id "
            "WHERE (posts.title = ?)"
        )

    def test_group_by_having(self, connection):
        query = (
            Query(connection=connection, table="posts")
            .select("user_id")
            .select_raw("COUNT(*) AS total")
            .group_by("user_id")
            .having_raw("COUNT(*) > ?", [2])
        )
        assert query.to_sql() == (
            "SELECT user_id, COUNT(*) AS total FROM posts GROUP BY user_id HAVING (COUNT(*) > ?)"
        )
        assert query.get_bindings() == [2]

    def test_offset_without_limit(self, connection):
        assert User.q(connection).offset(10).to_sql() == "SELECT * FROM users LIMIT -1 OFFSET 10"

    def test_to_sql_with_bindings(self, connection):
        query = User.q(connection).where("name", "O'Hara").where("age", 3)
        assert query.to_sql_with_bindings() == (
            "SELECT * FROM users WHERE (name = 'O''Hara') AND (age = 3)"
        )

    def test_builder_mutates_clone_does_not(self, connection):
        query = User.q(connection).where("age", 1)
        copy = query.clone().where("name", "x")
        assert query.where("email", "e") is query
        assert len(query.where_conditions) == 2
        assert len(copy.where_conditions) == 2
        assert "email" not in copy.to_sql()

    def test_having_or_connector(self, connection):
        query = (
            Query(connection=connection, table="posts")
            .select("user_id")
            .group_by("user_id")
            .having("user_id", ">", 1)
            .having_raw("COUNT(*) > ?", [2], boolean="or")
        )
        assert query.to_sql().endswith("HAVING (user_id > ?) OR (COUNT(*) > ?)")
        assert query.get_bindings() == [1, 2]

    def test_right_join(self, connection):
        query = Query(connection=connection, table="posts").right_join("users", "users.id", "posts.user_id")
        assert query.to_sql() == "SELECT posts.* FROM posts RIGHT JOIN users ON users.id = posts.user_id"

    def test_where_exists_merges_bindings_in_order(self, connection):
        posts = (
            Query(connection=connection, table="posts")
            .where_raw("posts.user_id = users.id")
            .where("is_published", True)
        )
        query = User.q(connection).where("is_active", True).where_exists(posts).where("age", ">", 18)
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (is_active = ?) AND "
            "(EXISTS (SELECT * FROM posts WHERE (posts.user_id = users.id) AND (is_published = ?))) "
            "AND (age > ?)"
        )
        assert query.get_bindings() == [True, True, 18]
        assert User.q(connection).where_not_exists(posts).to_sql().startswith(
            "SELECT * FROM users WHERE (NOT EXISTS (SELECT * FROM posts"
        )

    def test_union_renders_before_order_and_limit(self, connection):
        query = (
            User.q(connection)
            .where("age", "<", 20)
            .union(User.q(connection).where("age", ">", 60))
            .union_all(Query(connection=connection, table="users").where("name", "x"))
            .order_by("name")
            .limit(3)
        )
        assert query.to_sql() == (
            "SELECT * FROM users WHERE (age < ?) "
            "UNION SELECT * FROM users WHERE (age > ?) "
            "UNION ALL SELECT * FROM users WHERE (name = ?) "
            "ORDER BY name ASC LIMIT 3"
        )
        assert query.get_bindings() == [20, 60, "x"]
