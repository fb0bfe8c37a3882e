"""Seed survey loader: writes every company/tier survey range to the record store."""
from __future__ import annotations

from typing import Mapping

from salary_engine.core.log import get_logger, timeit
from salary_engine.core.text import normalize
from salary_engine.data.survey import (
    SURVEY_SAMPLE_WEIGHT,
    SURVEY_TABLE,
    TIER_TITLES,
    SurveyEntry,
)
from salary_engine.models import Confidence, SalarySource
from salary_engine.repositories import SalaryRecordData, SalaryRecordRepository

LOGGER = get_logger(__name__)


def survey_records(
    table: Mapping[str, SurveyEntry] = SURVEY_TABLE,
    *,
    location: str = "Israel",
    currency: str = "ILS",
) -> list[SalaryRecordData]:
    """Expand the survey table into one record per company and seniority tier."""

    records: list[SalaryRecordData] = []
    for entry in table.values():
        for tier, title in TIER_TITLES.items():
            salary_range = entry.range_for(tier)
            records.append(
                SalaryRecordData(
                    company_name=entry.company,
                    company_name_normalized=normalize(entry.company),
                    job_title=title,
                    job_title_normalized=normalize(title),
                    location=location,
                    min_salary=salary_range.min,
                    max_salary=salary_range.max,
                    median_salary=salary_range.midpoint,
                    currency=currency,
                    sample_count=SURVEY_SAMPLE_WEIGHT,
                    source=SalarySource.SEED_SURVEY.value,
                    confidence=Confidence.HIGH.value,
                )
            )
    return records


def populate_survey(
    repository: SalaryRecordRepository,
    table: Mapping[str, SurveyEntry] = SURVEY_TABLE,
    *,
    location: str = "Israel",
    currency: str = "ILS",
) -> int:
    """Upsert the whole survey; returns the number of records written."""

    records = survey_records(table, location=location, currency=currency)
    with timeit("Survey populate", logger=LOGGER, unit="records", total=len(records)) as timer:
        for record in records:
            if repository.upsert(record):
                timer.add()
            else:
                timer.fail()
    return timer.count
