"""Schema migrations for DayDeck.

The applied version lives in the single-row `schema_version` table (0 when
the table is missing). Each step between the stored version and
`CURRENT_VERSION` runs in its own transaction, and the version is advanced
inside that same transaction after the step's last statement. A failing
step is rolled back as a whole and startup aborts with `MigrationError`.
"""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, insert, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.schema import CreateIndex, CreateTable

from daydeck.database.database import Database
from daydeck.database.models import (
    DayPlanDB,
    SettingDB,
    SubtaskDB,
    TaskDB,
    TemplateDB,
    TimeBlockDB,
    schema_version_table,
)
from daydeck.errors import MigrationError

logger = logging.getLogger(__name__)

CURRENT_VERSION = 1


def _create_with_indexes(table) -> list:
    return [CreateTable(table)] + [CreateIndex(index) for index in sorted(table.indexes, key=lambda i: str(i.name))]


MIGRATIONS: Dict[int, Sequence] = {
    1: (
        _create_with_indexes(TaskDB.__table__)
        + _create_with_indexes(SubtaskDB.__table__)
        + _create_with_indexes(TimeBlockDB.__table__)
        + _create_with_indexes(DayPlanDB.__table__)
        + _create_with_indexes(TemplateDB.__table__)
        + _create_with_indexes(SettingDB.__table__)
        + [CreateTable(schema_version_table)]
    ),
}


def get_schema_version(conn: Connection) -> int:
    if not inspect(conn).has_table(schema_version_table.name):
        return 0
    version = conn.execute(select(schema_version_table.c.version).limit(1)).scalar()
    return int(version) if version is not None else 0


def _set_schema_version(conn: Connection, version: int) -> None:
    conn.execute(delete(schema_version_table))
    conn.execute(insert(schema_version_table).values(version=version))


def run_migrations(
    db: Database,
    migrations: Optional[Dict[int, Sequence]] = None,
    target_version: Optional[int] = None,
) -> List[int]:
    """Bring the schema up to `target_version` (default `CURRENT_VERSION`).

    Returns:
        Versions applied by this call, in order (empty if already current).

    Raises:
        MigrationError: a step failed; earlier steps stay committed.
    """
    migrations = MIGRATIONS if migrations is None else migrations
    target = CURRENT_VERSION if target_version is None else target_version

    with db.engine.connect() as conn:
        current = get_schema_version(conn)

    applied: List[int] = []
    for version in range(current + 1, target + 1):
        statements = migrations.get(version)
        if statements is None:
            continue
        try:
            with db.engine.begin() as conn:
                for statement in statements:
                    conn.execute(statement)
                _set_schema_version(conn, version)
        except Exception as e:
            logger.error(f"Migration to schema version {version} failed: {type(e).__name__}: {str(e)}")
            raise MigrationError(version, e) from e
        logger.info(f"Applied schema migration {version} ({len(statements)} statements)")
        applied.append(version)

    if not applied:
        logger.debug(f"Schema already at version {current}")
    return applied


def init_db(db: Database) -> List[int]:
    """Initialize the database schema. Fails loudly; never retried."""
    return run_migrations(db)
