"""Estimation fallback chain: store, survey, computed heuristic, unresolved."""
from __future__ import annotations

from unittest.mock import create_autospec

import pytest

from salary_engine.data import SURVEY_TABLE, company_tier
from salary_engine.data.heuristics import round_to_thousand
from salary_engine.repositories import SalaryRecordRepository
from salary_engine.schemas import EstimateSource, SalaryEstimate
from salary_engine.services import (
    ComputedHeuristicStrategy,
    EstimationResolver,
    StoreLookupStrategy,
    SurveyStrategy,
    compute_heuristic_estimate,
    has_company_data,
)


def _resolver(session) -> EstimationResolver:
    return EstimationResolver.default(SalaryRecordRepository(session))


def test_survey_match_for_senior_title(session) -> None:
    estimate = _resolver(session).estimate("Google", "Senior Software Engineer")

    assert (estimate.min, estimate.max) == (52000, 72000)
    assert estimate.source is EstimateSource.SURVEY
    assert estimate.confidence == "high"


def test_survey_match_uses_normalised_substring(session) -> None:
    estimate = _resolver(session).estimate("Google Israel Ltd.", "Software Engineer")

    assert (estimate.min, estimate.max) == (38000, 52000)


def test_store_record_takes_precedence_over_survey(session, record_factory) -> None:
    repo = SalaryRecordRepository(session)
    repo.upsert(record_factory("Google", "Senior Software Engineer", min_salary=61000, max_salary=83000,
                               confidence="high"))

    estimate = EstimationResolver.default(repo).estimate("Google", "Senior Software Engineer")

    assert (estimate.min, estimate.max) == (61000, 83000)
    assert estimate.source is EstimateSource.DATABASE


def test_store_falls_back_to_company_only_record(session, record_factory) -> None:
    repo = SalaryRecordRepository(session)
    repo.upsert(record_factory("Acme Widgets", "Software Engineer", min_salary=27000, max_salary=36000))

    estimate = EstimationResolver.default(repo).estimate("Acme Widgets", "Product Designer")

    assert estimate.source is EstimateSource.DATABASE
    assert estimate.min == 27000


def test_store_record_without_positive_minimum_is_skipped(session, record_factory) -> None:
    repo = SalaryRecordRepository(session)
    repo.upsert(record_factory("Google", "Senior Software Engineer", min_salary=0, max_salary=0))

    estimate = EstimationResolver.default(repo).estimate("Google", "Senior Software Engineer")

    assert estimate.source is EstimateSource.SURVEY


def test_unknown_company_uses_computed_heuristic(session) -> None:
    estimate = _resolver(session).estimate(
        "Acme Widgets", "Mid-Level Engineer", category="software", size="m"
    )

    assert (estimate.min, estimate.max) == (22000, 44000)
    assert estimate.source is EstimateSource.COMPUTED
    assert estimate.confidence == "medium"


def test_no_signal_is_unresolved(session) -> None:
    estimate = _resolver(session).estimate("Acme Widgets", "Product Designer")

    assert estimate == SalaryEstimate.unresolved()
    assert (estimate.min, estimate.max, estimate.confidence) == (0, 0, "low")


def test_failing_strategy_is_skipped() -> None:
    repo = create_autospec(SalaryRecordRepository, instance=True)
    repo.find.side_effect = RuntimeError("connection reset")
    resolver = EstimationResolver([StoreLookupStrategy(repo), SurveyStrategy()])

    estimate = resolver.estimate("Wix", "Backend Developer")

    assert estimate.source is EstimateSource.SURVEY


def test_resolver_never_raises_even_when_every_strategy_fails() -> None:
    class Broken:
        name = "broken"

        def attempt(self, query):
            raise ValueError("bad data")

    estimate = EstimationResolver([Broken(), Broken()]).estimate("", "")

    assert estimate.source is EstimateSource.ESTIMATED
    assert estimate.min == 0


def test_survey_strategy_accepts_injected_table(session) -> None:
    resolver = EstimationResolver([SurveyStrategy({"wix": SURVEY_TABLE["wix"]})])

    assert resolver.estimate("Wix", "Junior Developer").source is EstimateSource.SURVEY
    assert resolver.estimate("Google", "Junior Developer").source is EstimateSource.ESTIMATED


def test_computed_strategy_declines_without_signal() -> None:
    strategy = ComputedHeuristicStrategy()
    resolver = EstimationResolver([strategy])

    assert resolver.estimate("Acme Widgets", "Product Designer").source is EstimateSource.ESTIMATED
    assert resolver.estimate("Acme Widgets", "Senior Product Designer").source is EstimateSource.COMPUTED


def test_heuristic_level_base_without_category_is_medium() -> None:
    estimate = compute_heuristic_estimate("Startup", "Software Engineer", level="Intern")

    assert (estimate.min, estimate.max) == (6000, 12000)
    assert estimate.confidence == "medium"


def test_heuristic_without_level_or_category_is_low() -> None:
    estimate = compute_heuristic_estimate("", "Engineer")

    assert (estimate.min, estimate.max) == (20000, 40000)
    assert estimate.confidence == "low"


def test_heuristic_known_company_upgrades_medium_to_high() -> None:
    estimate = compute_heuristic_estimate("Wix", "Software Engineer", category="software")

    assert (estimate.min, estimate.max) == (28000, 55000)
    assert estimate.confidence == "high"


def test_heuristic_with_full_signal_is_high() -> None:
    estimate = compute_heuristic_estimate("Acme Widgets", "Backend Developer", "Manager", "qa", "xs")

    assert estimate.confidence == "high"
    assert estimate.min == round_to_thousand(38000 * 0.9 * 0.85)


@pytest.mark.parametrize("value, expected", [(21500, 22000), (20499, 20000), (0, 0), (999.9, 1000)])
def test_round_to_thousand_half_up(value, expected) -> None:
    assert round_to_thousand(value) == expected


def test_company_data_and_tiers() -> None:
    assert has_company_data("Wix")
    assert not has_company_data("Acme Widgets")
    assert company_tier("Google") == "top"
    assert company_tier("Wix") == "high"
    assert company_tier("Acme Widgets") == "standard"
