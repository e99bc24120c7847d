from __future__ import annotations

import os
import sys
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"

REQUIRED_TABLES = ("actions", "businesses", "users", "action_statuses", "action_processes")
REQUIRED_STATUSES = ("outstanding", "completed")


def _load_database_url() -> str:
    env_url = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URL")
    if not env_url:
        raise RuntimeError("DATABASE_URL or SQLALCHEMY_DATABASE_URL must be set.")
    return env_url


def _fetch_db_revision(engine: Engine) -> str | None:
    if "alembic_version" not in inspect(engine).get_table_names():
        return None
    with engine.connect() as conn:
        row = conn.execute(text("SELECT version_num FROM alembic_version")).first()
        return row[0] if row else None


def _missing_statuses(engine: Engine) -> list[str]:
    with engine.connect() as conn:
        present = {row[0] for row in conn.execute(text("SELECT slug FROM action_statuses"))}
    return [slug for slug in REQUIRED_STATUSES if slug not in present]


def main() -> int:
    errors = []
    database_url = _load_database_url()
    script = ScriptDirectory.from_config(Config(str(ALEMBIC_INI)))
    heads = script.get_heads()

    engine = create_engine(database_url, future=True)
    try:
        db_revision = _fetch_db_revision(engine)
        tables = set(inspect(engine).get_table_names())
        missing_tables = [name for name in REQUIRED_TABLES if name not in tables]
        missing_statuses = [] if "action_statuses" in missing_tables else _missing_statuses(engine)
    finally:
        engine.dispose()

    print("DB sanity report")
    print(f"- SQLAlchemy URL: {make_url(database_url).render_as_string(hide_password=True)}")
    print(f"- Alembic heads in repo: {heads}")
    print(f"- DB alembic_version: {db_revision}")

    if len(heads) != 1:
        errors.append(f"Expected exactly one alembic head, found {len(heads)}: {heads}")
    if db_revision is None:
        errors.append("Database has no alembic_version table or no revision recorded.")
    elif script.get_revision(db_revision) is None:
        errors.append(f"Database revision {db_revision} is not present in the repo revision map.")
    if missing_tables:
        errors.append(f"Missing tables: {', '.join(missing_tables)}")
    if missing_statuses:
        errors.append(f"Missing action statuses: {', '.join(missing_statuses)}")

    if errors:
        print("\nERRORS:")
        for error in errors:
            print(f"- {error}")
        return 1

    print("\nOK: schema, reference data and alembic revision are in sync.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
