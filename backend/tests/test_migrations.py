from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

BACKEND_DIR = Path(__file__).resolve().parents[1]


def test_upgrade_creates_tasks_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = Config()
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", url)

    command.upgrade(config, "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    columns = {column["name"] for column in inspector.get_columns("tasks")}
    assert {"id", "name", "assignee", "due_date", "priority", "status", "original_input", "created_at"} <= columns
    indexes = {index["name"] for index in inspector.get_indexes("tasks")}
    assert "ix_tasks_due_date" in indexes

    command.downgrade(config, "base")
    assert "tasks" not in inspect(engine).get_table_names()
    engine.dispose()
