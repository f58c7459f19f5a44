"""``recordmap`` command line: run migrations and create migration files."""

import logging
import sys
from typing import Optional

import click

from .config import get_settings
from .connection import Connection
from .errors import MigrationFailure
from .migrations import MigrationRunner, load_migrations, make_migration

ACTIONS = ("migrate", "rollback", "reset", "refresh", "status")


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """recordmap - records, queries and schema migrations."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _echo_units(verb: str, identifiers: list[str], nothing: str) -> None:
    if not identifiers:
        click.echo(nothing)
    for identifier in identifiers:
        click.echo(f"{verb}: {identifier}")


@cli.command("migrate")
@click.argument("action", type=click.Choice(ACTIONS), default="migrate")
@click.option("--step", "-s", type=click.IntRange(min=1), help="Number of units (migrate) or batches (rollback)")
@click.option("--database-url", help="Database URL (default: RECORDMAP_DATABASE_URL)")
@click.option("--path", "path", help="Migrations directory (default: RECORDMAP_MIGRATIONS_PATH)")
def migrate(action: str, step: Optional[int], database_url: Optional[str], path: Optional[str]):
    """
    Apply, reverse or inspect migrations.

    Examples:
        recordmap migrate
        recordmap migrate rollback --step 2
        recordmap migrate status
    """
    settings = get_settings()
    units = load_migrations(path or settings.migrations_path)
    connection = Connection.from_url(database_url or settings.database_url)
    try:
        runner = MigrationRunner(
            connection,
            units,
            table=settings.migrations_table,
            unit_boundary=connection.transaction,
        )
        connection.commit()
        if action == "migrate":
            _echo_units("Migrated", runner.migrate(step), "Nothing to migrate.")
        elif action == "rollback":
            _echo_units("Rolled back", runner.rollback(step), "Nothing to roll back.")
        elif action == "reset":
            _echo_units("Rolled back", runner.reset(), "Nothing to roll back.")
        elif action == "refresh":
            reversed_, applied = runner.refresh()
            _echo_units("Rolled back", reversed_, "Nothing to roll back.")
            _echo_units("Migrated", applied, "Nothing to migrate.")
        else:
            statuses = runner.status()
            if not statuses:
                click.echo("No migrations found.")
            for status in statuses:
                click.echo(f"{status.identifier:<60} {status.state}")
    except MigrationFailure as error:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    finally:
        connection.close()


@cli.command("make-migration")
@click.argument("name")
@click.option("--table", help="Table the migration alters")
@click.option("--create", is_flag=True, help="The migration creates the table")
@click.option("--path", "path", help="Migrations directory (default: RECORDMAP_MIGRATIONS_PATH)")
def make_migration_command(name: str, table: Optional[str], create: bool, path: Optional[str]):
    """Create a new timestamp-prefixed migration file."""
    file = make_migration(path or get_settings().migrations_path, name, table=table, create=create)
    click.echo(f"Created migration: {file.name}")
    click.echo(f"Location: {file}")


if __name__ == "__main__":
    cli()
