"""Immutable seed tables: survey ranges and estimation multipliers."""

from .heuristics import (
    CATEGORY_MULTIPLIERS,
    COMPANY_MULTIPLIERS,
    LEVEL_BASE_RANGES,
    SIZE_MULTIPLIERS,
    company_multiplier,
    company_tier,
    round_to_thousand,
    title_multiplier,
)
from .survey import (
    SURVEY_SAMPLE_WEIGHT,
    SURVEY_TABLE,
    TIER_TITLES,
    SalaryRange,
    SurveyEntry,
    find_survey_entry,
)

__all__ = [
    "CATEGORY_MULTIPLIERS",
    "COMPANY_MULTIPLIERS",
    "LEVEL_BASE_RANGES",
    "SIZE_MULTIPLIERS",
    "SURVEY_SAMPLE_WEIGHT",
    "SURVEY_TABLE",
    "TIER_TITLES",
    "SalaryRange",
    "SurveyEntry",
    "company_multiplier",
    "company_tier",
    "find_survey_entry",
    "round_to_thousand",
    "title_multiplier",
]
