import pytest

from recordmap.config import reset_settings
from recordmap.connection import Connection
from recordmap.schema import Schema


@pytest.fixture(scope="function")
def connection(tmp_path):
    """A fresh file-backed SQLite connection for each test."""
    conn = Connection.from_url(f"sqlite:///{tmp_path / 'test.sqlite3'}")
    yield conn
    conn.close()


def _create_tables(schema: Schema) -> None:
    def users(table):
        table.id()
        table.string("name")
        table.string("email").unique()
        table.integer("age").default(0)
        table.boolean("is_active").default(True)
        table.timestamps()

    def posts(table):
        table.id()
        table.foreign_id("user_id").nullable().constrained("users").cascade_on_delete()
        table.string("title")
        table.text("body").default("")
        table.boolean("is_published").default(False)
        table.timestamps()
        table.soft_deletes()

    def roles(table):
        table.id()
        table.string("name")

    def role_user(table):
        table.foreign_id("role_id").constrained("roles")
        table.foreign_id("user_id").constrained("users")
        table.primary("role_id", "user_id")

    def profiles(table):
        table.id()
        table.foreign_id("user_id").nullable().constrained("users")
        table.text("bio").default("")

    def comments(table):
        table.id()
        table.foreign_id("post_id").nullable().constrained("posts")
        table.text("body")

    schema.create("users", users)
    schema.create("posts", posts)
    schema.create("roles", roles)
    schema.create("role_user", role_user)
    schema.create("profiles", profiles)
    schema.create("comments", comments)


@pytest.fixture(scope="function")
def schema(connection):
    """The connection, with the users/posts/roles/role_user/profiles/comments tables created."""
    _create_tables(Schema(connection))
    connection.commit()
    return connection


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Settings are re-read from a clean environment in every test."""
    for name in ("DATABASE_URL", "MIGRATIONS_PATH", "MIGRATIONS_TABLE", "LOG_LEVEL"):
        monkeypatch.delenv(f"RECORDMAP_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()
