"""Create the salary tables if missing and report what the store currently holds."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import func, inspect, select

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salary_engine.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from salary_engine.core.log import get_logger, init_logging, shutdown_logging  # noqa: E402
from salary_engine.db.engine import create_sync_engine  # noqa: E402
from salary_engine.models import Base, SalaryRecord, SalaryReport  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only report missing tables and row counts; create nothing",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    engine = create_sync_engine()

    existing = set(inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - existing)
    logger.info("Connected to %s; missing tables: %s", settings.database.masked_url, missing or "none")

    if missing and args.check_only:
        return 1
    if missing:
        Base.metadata.create_all(engine)
        logger.info("Created %s", ", ".join(missing))

    with engine.connect() as conn:
        records = conn.execute(select(func.count()).select_from(SalaryRecord)).scalar()
        reports = conn.execute(select(func.count()).select_from(SalaryReport)).scalar()
    logger.info("salary_data rows: %s, salary_reports rows: %s", records, reports)
    return 0


if __name__ == "__main__":
    init_logging(app_name="init-db")
    try:
        sys.exit(main())
    finally:
        shutdown_logging()
