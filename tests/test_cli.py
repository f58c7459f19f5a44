"""Tests for the recordmap command line (click CliRunner)."""

import textwrap

import pytest
from click.testing import CliRunner

from recordmap.cli import cli
from recordmap.connection import Connection
from recordmap.schema import Schema

_CREATE_NOTES = '''
from recordmap.migrations import Migration


class CreateNotes(Migration):

    def up(self, schema):
        def columns(table):
            table.id()
            table.text("body")
        schema.create("notes", columns)

    def down(self, schema):
        schema.drop("notes")
'''

_BROKEN = '''
from recordmap.migrations import Migration


class Broken(Migration):

    def up(self, schema):
        schema.statement("THIS IS NOT SQL")

    def down(self, schema):
        pass
'''


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A migrations directory and a database URL passed through the environment."""
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "2024_01_01_000000_create_notes_table.py").write_text(textwrap.dedent(_CREATE_NOTES))
    database = tmp_path / "app.sqlite3"
    monkeypatch.setenv("RECORDMAP_DATABASE_URL", f"sqlite:///{database}")
    monkeypatch.setenv("RECORDMAP_MIGRATIONS_PATH", str(migrations))
    return migrations, database


def _has_notes(database):
    connection = Connection.from_url(f"sqlite:///{database}")
    try:
        return Schema(connection).has_table("notes")
    finally:
        connection.close()


class TestMigrateCommand:
    """recordmap migrate [ACTION]"""

    def test_migrate_and_rollback(self, project):
        migrations, database = project
        runner = CliRunner()
        result = runner.invoke(cli, ["migrate"])
        assert result.exit_code == 0, result.output
        assert "Migrated: 2024_01_01_000000_create_notes_table" in result.output
        assert _has_notes(database)

        result = runner.invoke(cli, ["migrate", "status"])
        assert result.exit_code == 0
        assert "applied (batch 1)" in result.output

        result = runner.invoke(cli, ["migrate", "rollback"])
        assert result.exit_code == 0
        assert "Rolled back: 2024_01_01_000000_create_notes_table" in result.output
        assert not _has_notes(database)

    def test_nothing_to_migrate(self, project):
        runner = CliRunner()
        runner.invoke(cli, ["migrate"])
        result = runner.invoke(cli, ["migrate"])
        assert result.exit_code == 0
        assert "Nothing to migrate." in result.output

    def test_failure_exits_with_one_and_keeps_completed_units(self, project):
        migrations, database = project
        (migrations / "2024_01_02_000000_broken.py").write_text(textwrap.dedent(_BROKEN))
        result = CliRunner().invoke(cli, ["migrate"])
        assert result.exit_code == 1
        assert "2024_01_02_000000_broken" in result.output
        assert _has_notes(database)

    def test_options_override_settings(self, project, tmp_path):
        migrations, _ = project
        other = tmp_path / "other.sqlite3"
        result = CliRunner().invoke(
            cli, ["migrate", "--database-url", f"sqlite:///{other}", "--path", str(migrations)]
        )
        assert result.exit_code == 0
        assert _has_notes(other)

    def test_invalid_action_and_step(self, project):
        runner = CliRunner()
        assert runner.invoke(cli, ["migrate", "explode"]).exit_code == 2
        assert runner.invoke(cli, ["migrate", "rollback", "--step", "0"]).exit_code == 2


class TestMakeMigrationCommand:
    """recordmap make-migration NAME"""

    def test_creates_file(self, tmp_path):
        target = tmp_path / "new"
        result = CliRunner().invoke(
            cli, ["make-migration", "create_books_table", "--create", "--path", str(target)]
        )
        assert result.exit_code == 0, result.output
        files = list(target.glob("*_create_books_table.py"))
        assert len(files) == 1
        assert 'schema.create("books", columns)' in files[0].read_text()
