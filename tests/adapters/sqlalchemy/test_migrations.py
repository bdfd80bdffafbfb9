from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine  # noqa: TC002

from contactmerge.adapters.sqlalchemy.mappings import mapper_registry
from contactmerge.adapters.sqlalchemy.migrations import upgrade_head


def test_migrations_create_mapped_tables(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert set(mapper_registry.metadata.tables) <= set(inspector.get_table_names())
    contact_indexes = {index["name"] for index in inspector.get_indexes("contact")}
    assert "ix_contact_email" in contact_indexes


def test_upgrade_head_is_repeatable(sqlite_engine: Engine) -> None:
    upgrade_head(engine=sqlite_engine)

    assert "alembic_version" in inspect(sqlite_engine).get_table_names()


def test_upgrade_head_with_database_uri(tmp_path: Path) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'contacts.db'}"

    upgrade_head(database_uri=uri)

    engine = create_engine(uri)
    try:
        assert "contact_merge" in inspect(engine).get_table_names()
    finally:
        engine.dispose()
