from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT))


def _database_url(cli_url: str | None) -> str:
    url = cli_url or os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URL")
    if not url:
        raise RuntimeError("Pass --url or set DATABASE_URL / SQLALCHEMY_DATABASE_URL.")
    return url


def _sqlite_file(database_url: str) -> Path | None:
    url = make_url(database_url)
    if not url.get_backend_name().startswith("sqlite"):
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


def reset_schema(database_url: str) -> None:
    """Bring the database back to an empty schema at the alembic head."""
    config = Config(str(REPO_ROOT / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", database_url)

    db_file = _sqlite_file(database_url)
    if db_file is not None:
        db_file.unlink(missing_ok=True)
    else:
        command.downgrade(config, "base")
    command.upgrade(config, "head")


def seed_demo(database_url: str, count: int) -> int:
    os.environ.setdefault("DATABASE_URL", database_url)
    from backend.app.seed.run import seed_demo_actions

    engine = create_engine(database_url, future=True)
    session = sessionmaker(bind=engine, future=True)()
    try:
        return seed_demo_actions(session, count=count)
    finally:
        session.close()
        engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Reset the actions database to an empty schema.")
    parser.add_argument("--url", help="Database URL (defaults to DATABASE_URL).")
    parser.add_argument("--yes", action="store_true", help="Confirm that all data will be lost.")
    parser.add_argument("--seed", action="store_true", help="Load the demo businesses, users and actions.")
    parser.add_argument("--count", type=int, default=42, help="Demo actions to create with --seed.")
    args = parser.parse_args()

    if not args.yes:
        print("Refusing to reset without --yes.")
        return 1

    database_url = _database_url(args.url)
    reset_schema(database_url)
    print("Schema reset to head")

    if args.seed:
        print(f"Seeded {seed_demo(database_url, args.count)} demo actions")

    print(f"Database URL: {make_url(database_url).render_as_string(hide_password=True)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
