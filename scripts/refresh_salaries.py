#!/usr/bin/env python3
"""Run salary batch jobs from the command line (cron-friendly)."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salary_engine.core.config import get_settings  # noqa: E402
from salary_engine.core.log import (  # noqa: E402
    get_logger,
    init_logging,
    log_context,
    progress_manager,
    set_level,
    shutdown_logging,
)
from salary_engine.db import get_sessionmaker  # noqa: E402
from salary_engine.services.external_batch import BATCH_COMPANIES, BATCH_TITLES  # noqa: E402
from salary_engine.services.jobs import (  # noqa: E402
    refresh_all,
    run_aggregation,
    run_company_populate,
    run_external_fetch,
    run_survey_populate,
)

logger = get_logger(__name__)

JOBS = ("survey", "external", "aggregate", "companies", "all")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("job", choices=JOBS, help="Which batch job to run")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    settings = get_settings()
    factory = get_sessionmaker()

    with log_context.scoped(job=args.job):
        if args.job == "survey":
            result = run_survey_populate(factory, settings)
        elif args.job == "external":
            total = len(BATCH_TITLES) + len(BATCH_COMPANIES)
            with progress_manager.ticker("External fetch", total=total) as tick:
                result = run_external_fetch(factory, settings, on_progress=tick)
        elif args.job == "aggregate":
            result = run_aggregation(factory, settings)
        elif args.job == "companies":
            with progress_manager.ticker("Company populate") as tick:
                result = run_company_populate(factory, settings, on_progress=tick)
        else:
            result = refresh_all(factory, settings)

    logger.info("%s finished: %s", args.job, result)
    return 0


if __name__ == "__main__":
    init_logging(app_name="salary-refresh")
    try:
        sys.exit(main())
    finally:
        shutdown_logging()
