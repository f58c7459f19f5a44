"""Migration units: base class, directory loader and stub writer."""

import importlib.util
import inspect
import logging
import re
from pathlib import Path
from typing import ClassVar, Optional, Union

from ..errors import ValidationError
from ..utils.now import utcnow

logger = logging.getLogger("recordmap")

_MIGRATION_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


class Migration:
    """One forward/reverse pair of schema changes.

    Subclasses implement ``up(schema)`` and ``down(schema)``, where ``schema``
    is a ``recordmap.schema.Schema``. The identifier is the file stem for
    units loaded with ``load_migrations``, or the ``name`` class attribute.
    """

    name: ClassVar[Optional[str]] = None

    def __init__(self, identifier: Optional[str] = None):
        identifier = identifier or type(self).name
        if not identifier:
            raise ValidationError(f"{type(self).__name__} has no identifier")
        self.identifier = identifier

    def up(self, schema) -> None:
        raise NotImplementedError

    def down(self, schema) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.identifier}>"


def _load_file(path: Path) -> Migration:
    spec = importlib.util.spec_from_file_location(f"recordmap_migrations.{path.stem}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    classes = [
        value
        for value in vars(module).values()
        if inspect.isclass(value)
        and issubclass(value, Migration)
        and value is not Migration
        and value.__module__ == module.__name__
    ]
    if len(classes) != 1:
        raise ValidationError(
            f"{path.name} must define exactly one Migration subclass, found {len(classes)}"
        )
    return classes[0](path.stem)


def load_migrations(path: Union[str, Path]) -> list[Migration]:
    """Import every ``*.py`` unit of a directory, in file name order.

    Files starting with ``_`` are skipped; a missing directory holds no units.
    """
    directory = Path(path)
    if not directory.is_dir():
        logger.debug("No migrations directory at %s", directory)
        return []
    return [
        _load_file(file)
        for file in sorted(directory.glob("*.py"))
        if not file.name.startswith("_")
    ]


def guess_table_name(name: str) -> Optional[str]:
    """Table a migration name is about (``create_users_table`` -> ``users``)."""
    for pattern in (r"^create_(\w+?)_table$", r"^add_\w+_to_(\w+?)(_table)?$",
                    r"^drop_\w+_from_(\w+?)(_table)?$", r"^modify_\w+_in_(\w+?)(_table)?$"):
        match = re.match(pattern, name)
        if match:
            return match.group(1)
    return None


_CREATE_STUB = '''"""{name}"""

from recordmap.migrations import Migration


class {class_name}(Migration):

    def up(self, schema):
        def columns(table):
            table.id()
            table.timestamps()
        schema.create("{table}", columns)

    def down(self, schema):
        schema.drop_if_exists("{table}")
'''

_TABLE_STUB = '''"""{name}"""

from recordmap.migrations import Migration


class {class_name}(Migration):

    def up(self, schema):
        def columns(table):
            pass
        schema.table("{table}", columns)

    def down(self, schema):
        def columns(table):
            pass
        schema.table("{table}", columns)
'''

_BLANK_STUB = '''"""{name}"""

from recordmap.migrations import Migration


class {class_name}(Migration):

    def up(self, schema):
        pass

    def down(self, schema):
        pass
'''


def make_migration(
    path: Union[str, Path], name: str, table: Optional[str] = None, create: bool = False
) -> Path:
    """Write ``<path>/<YYYY_MM_DD_HHMMSS>_<name>.py`` from a stub and return its path.

    With ``create=True`` the stub creates ``table`` (guessed from the name
    when omitted); with only ``table`` it alters it.
    """
    if not _MIGRATION_NAME.match(name):
        raise ValidationError(f"Migration name must be snake_case, got {name!r}")
    if create and table is None:
        table = guess_table_name(name) or name
    if create:
        stub = _CREATE_STUB
    elif table:
        stub = _TABLE_STUB
    else:
        stub = _BLANK_STUB
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    file = directory / f"{utcnow().strftime('%Y_%m_%d_%H%M%S')}_{name}.py"
    if file.exists():
        raise FileExistsError(file)
    class_name = "".join(part.capitalize() for part in name.split("_"))
    file.write_text(stub.format(name=name, class_name=class_name, table=table))
    logger.info("Created migration %s", file.name)
    return file


__all__ = ["Migration", "load_migrations", "make_migration", "guess_table_name"]
