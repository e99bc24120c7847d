from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text

from backend.app.db import Base


ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def _load_script() -> ScriptDirectory:
    config = Config(str(ALEMBIC_INI))
    return ScriptDirectory.from_config(config)


def _config_for(database_url: str) -> Config:
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def test_alembic_single_head():
    script = _load_script()
    heads = script.get_heads()
    assert len(heads) == 1


def test_alembic_revision_graph_has_no_gaps():
    script = _load_script()
    revisions = list(script.walk_revisions())
    assert revisions
    assert revisions[-1].down_revision is None


def test_alembic_upgrade_creates_schema_and_statuses(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'alembic.db'}"
    command.upgrade(_config_for(database_url), "head")

    engine = create_engine(database_url, future=True)
    try:
        tables = set(inspect(engine).get_table_names())
        with engine.connect() as conn:
            revision = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
            statuses = dict(conn.execute(text("SELECT slug, name FROM action_statuses")).all())
    finally:
        engine.dispose()

    assert {"actions", "businesses", "users", "action_statuses", "action_processes"} <= tables
    assert _load_script().get_revision(revision) is not None
    assert statuses == {"outstanding": "Outstanding", "completed": "Completed"}


def test_migration_matches_model_tables(tmp_path):
    migrated_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    command.upgrade(_config_for(migrated_url), "head")
    migrated = create_engine(migrated_url, future=True)
    bootstrapped = create_engine(f"sqlite:///{tmp_path / 'bootstrap.db'}", future=True)
    Base.metadata.create_all(bind=bootstrapped)
    try:
        for table in Base.metadata.sorted_tables:
            migrated_cols = {col["name"] for col in inspect(migrated).get_columns(table.name)}
            model_cols = {col["name"] for col in inspect(bootstrapped).get_columns(table.name)}
            assert migrated_cols == model_cols, table.name
    finally:
        migrated.dispose()
        bootstrapped.dispose()


def test_dev_reset_wipes_data_and_reseeds(tmp_path):
    from backend.scripts import dev_reset_db

    database_url = f"sqlite:///{tmp_path / 'dev.db'}"
    dev_reset_db.reset_schema(database_url)
    assert dev_reset_db.seed_demo(database_url, 6) == 6

    dev_reset_db.reset_schema(database_url)

    engine = create_engine(database_url, future=True)
    try:
        with engine.connect() as conn:
            actions = conn.execute(text("SELECT count(*) FROM actions")).scalar()
            statuses = conn.execute(text("SELECT count(*) FROM action_statuses")).scalar()
    finally:
        engine.dispose()

    assert actions == 0
    assert statuses == 2
