from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from raffle.db.engine import make_engine
from raffle.storage import SqlBackend
from raffle.store import DEFAULT_STORAGE_KEY


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations to the durable session database."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def print_tables() -> None:
    """Report the tables of the durable database and whether a session is stored."""
    engine = make_engine()
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))
    backend = SqlBackend.from_engine(engine, name="durable", create_schema=False)
    stored = backend.get_item(DEFAULT_STORAGE_KEY) is not None
    print(f"Session '{DEFAULT_STORAGE_KEY}' stored:", "yes" if stored else "no")


def main() -> None:
    """Apply migrations (default to head) and report the resulting schema."""
    upgrade_db()
    print_tables()


if __name__ == "__main__":
    main()
