"""Salary estimation as an ordered chain of resolution strategies.

The resolver asks each strategy in turn and returns the first estimate
produced: record store, then seed survey, then the computed heuristic. When
nothing applies the caller gets a zero range tagged ``estimated``. A strategy
that raises is logged and skipped, so :meth:`EstimationResolver.estimate`
always returns a :class:`SalaryEstimate`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from salary_engine.core.log import get_logger
from salary_engine.core.text import classify_seniority, normalize
from salary_engine.data import (
    CATEGORY_MULTIPLIERS,
    COMPANY_MULTIPLIERS,
    LEVEL_BASE_RANGES,
    SIZE_MULTIPLIERS,
    SURVEY_TABLE,
    SurveyEntry,
    company_multiplier,
    find_survey_entry,
    round_to_thousand,
    title_multiplier,
)
from salary_engine.data.heuristics import DEFAULT_LEVEL
from salary_engine.repositories import SalaryRecordRepository
from salary_engine.schemas import EstimateSource, SalaryEstimate

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class EstimateQuery:
    company: str
    title: str
    level: str | None = None
    category: str | None = None
    size: str | None = None


class EstimationStrategy(Protocol):
    name: str

    def attempt(self, query: EstimateQuery) -> SalaryEstimate | None:
        ...


class StoreLookupStrategy:
    """Best stored record for (company, title), falling back to company only."""

    name = "store"

    def __init__(self, repository: SalaryRecordRepository) -> None:
        self._repository = repository

    def attempt(self, query: EstimateQuery) -> SalaryEstimate | None:
        company = normalize(query.company)
        title = normalize(query.title)
        record = self._repository.find(company, title or None)
        if record is None and title:
            record = self._repository.find(company)
        if record is None or not record.is_usable:
            return None
        minimum = record.min_salary
        return SalaryEstimate(
            min=minimum,
            max=max(record.max_salary or minimum, minimum),
            source=EstimateSource.DATABASE,
            confidence=record.confidence,
        )


class SurveyStrategy:
    name = "survey"

    def __init__(self, table: Mapping[str, SurveyEntry] = SURVEY_TABLE) -> None:
        self._table = table

    def attempt(self, query: EstimateQuery) -> SalaryEstimate | None:
        entry = find_survey_entry(query.company, self._table)
        if entry is None:
            return None
        salary_range = entry.range_for(classify_seniority(query.title))
        return SalaryEstimate(
            min=salary_range.min,
            max=salary_range.max,
            source=EstimateSource.SURVEY,
            confidence="high",
        )


def compute_heuristic_estimate(
    company: str | None,
    title: str | None,
    level: str | None = None,
    category: str | None = None,
    size: str | None = None,
    *,
    company_table: Mapping[str, float] = COMPANY_MULTIPLIERS,
) -> SalaryEstimate:
    """Level base range scaled by category, title, size and company multipliers."""

    base = LEVEL_BASE_RANGES.get(level or "", LEVEL_BASE_RANGES[DEFAULT_LEVEL])
    company_mult = company_multiplier(company, company_table)
    total = (
        CATEGORY_MULTIPLIERS.get(category or "", 1.0)
        * title_multiplier(title)
        * SIZE_MULTIPLIERS.get(size or "", 1.0)
        * company_mult
    )

    if level and category and size:
        confidence = "high"
    elif not level and not category:
        confidence = "low"
    else:
        confidence = "medium"
    if company_mult != 1.0 and confidence == "medium":
        confidence = "high"

    return SalaryEstimate(
        min=round_to_thousand(base.min * total),
        max=round_to_thousand(base.max * total),
        source=EstimateSource.COMPUTED,
        confidence=confidence,
    )


class ComputedHeuristicStrategy:
    """Multiplier heuristic; declines only when the query carries no signal at all."""

    name = "computed"

    def __init__(self, company_table: Mapping[str, float] = COMPANY_MULTIPLIERS) -> None:
        self._company_table = company_table

    def _has_signal(self, query: EstimateQuery) -> bool:
        if query.level or query.category or query.size:
            return True
        if title_multiplier(query.title) != 1.0:
            return True
        return company_multiplier(query.company, self._company_table) != 1.0

    def attempt(self, query: EstimateQuery) -> SalaryEstimate | None:
        if not self._has_signal(query):
            return None
        return compute_heuristic_estimate(
            query.company,
            query.title,
            query.level,
            query.category,
            query.size,
            company_table=self._company_table,
        )


class EstimationResolver:
    def __init__(self, strategies: Sequence[EstimationStrategy]) -> None:
        self._strategies = tuple(strategies)

    @classmethod
    def default(cls, repository: SalaryRecordRepository) -> "EstimationResolver":
        return cls(
            [
                StoreLookupStrategy(repository),
                SurveyStrategy(),
                ComputedHeuristicStrategy(),
            ]
        )

    def estimate(
        self,
        company: str,
        title: str,
        level: str | None = None,
        category: str | None = None,
        size: str | None = None,
    ) -> SalaryEstimate:
        query = EstimateQuery(company or "", title or "", level, category, size)
        for strategy in self._strategies:
            try:
                result = strategy.attempt(query)
            except Exception:
                LOGGER.exception(
                    "Estimation strategy %s failed for %s / %s", strategy.name, company, title
                )
                continue
            if result is not None:
                LOGGER.debug("Estimate for %s / %s resolved by %s", company, title, strategy.name)
                return result
        return SalaryEstimate.unresolved()


def has_company_data(company: str | None) -> bool:
    """``True`` when the company appears in the curated multiplier table."""

    return company_multiplier(company) != 1.0
