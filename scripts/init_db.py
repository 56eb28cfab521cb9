from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from arenadraw.db.engine import make_engine


def upgrade_cache_db(target_revision: str = "head") -> None:
    """Create or upgrade the progress cache tables via Alembic."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def report_entries() -> None:
    """Print the cache tables and how many progress entries they hold."""
    engine = make_engine()
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))
    if insp.has_table("progress_entries"):
        from sqlalchemy import func, select

        from arenadraw.models import ProgressEntry

        with engine.connect() as conn:
            count = conn.scalar(select(func.count()).select_from(ProgressEntry))
        print(f"Cached progress entries: {count}")


def main() -> None:
    upgrade_cache_db()
    report_entries()


if __name__ == "__main__":
    main()
