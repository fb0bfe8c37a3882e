"""External estimation API parsing, scrape fallback and the batch fetch loop."""
from __future__ import annotations

import httpx
import pytest

from salary_engine.core.config import ExternalSourceSettings
from salary_engine.repositories import SalaryRecordRepository
from salary_engine.services import ExternalFetchBatch, GlassdoorScraper, SalaryEstimationApi
from salary_engine.services.external_api import collapse_confidence, parse_estimation_response
from salary_engine.services.scraper import parse_salary_range

RATES = {"USD": 3.7}


def _settings(api_key: str | None = "test-key") -> ExternalSourceSettings:
    return ExternalSourceSettings(
        api_key=api_key,
        api_host="salary.example.test",
        request_delay_seconds=1.5,
        api_timeout_seconds=5,
        scrape_timeout_seconds=5,
        usd_to_ils_rate=3.7,
    )


def _payload(**data) -> dict:
    base = {
        "min_salary": 30000,
        "max_salary": 45000,
        "median_salary": 37000,
        "salary_count": 42,
        "salary_currency": "ILS",
        "salary_period": "MONTH",
        "confidence": "HIGH",
        "job_title": "Software Engineer",
        "location": "Tel Aviv",
    }
    base.update(data)
    return {"status": "OK", "data": base}


def _parse(payload, company: str = "Wix", title: str = "Software Engineer Wix"):
    return parse_estimation_response(payload, company=company, search_title=title, exchange_rates=RATES)


def test_parse_monthly_ils_response() -> None:
    record = _parse(_payload())

    assert (record.min_salary, record.max_salary, record.median_salary) == (30000, 45000, 37000)
    assert record.sample_count == 42
    assert record.confidence == "high"
    assert record.source == "external-api"
    assert record.company_name_normalized == "wix"
    assert record.location == "Tel Aviv"


def test_annual_amounts_are_divided_by_twelve() -> None:
    record = _parse(_payload(min_salary=360000, max_salary=540000, median_salary=450000, salary_period="YEAR"))

    assert (record.min_salary, record.max_salary, record.median_salary) == (30000, 45000, 37500)


def test_usd_amounts_are_converted_at_fixed_rate() -> None:
    record = _parse(_payload(min_salary=10000, max_salary=12000, median_salary=11000, salary_currency="USD"))

    assert (record.min_salary, record.max_salary, record.median_salary) == (37000, 44400, 40700)
    assert record.currency == "ILS"


def test_annual_usd_is_converted_then_monthly() -> None:
    record = _parse(
        _payload(min_salary=120000, max_salary=180000, median_salary=0, salary_currency="USD", salary_period="ANNUAL")
    )

    assert (record.min_salary, record.max_salary) == (37000, 55500)
    assert record.median_salary == (37000 + 55500) // 2


def test_base_salary_field_names_are_accepted() -> None:
    payload = {"status": "OK", "data": {"min_base_salary": 20000, "max_base_salary": 26000}}

    record = _parse(payload, company="", title="QA Engineer")

    assert (record.min_salary, record.max_salary, record.median_salary) == (20000, 26000, 23000)
    assert record.sample_count == 1
    assert record.company_name == "General"
    assert record.job_title == "QA Engineer"
    assert record.confidence == "low"
    assert "glassdoor.com/Salaries/QA-Engineer" in record.source_url


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "ERROR", "data": {}},
        {"status": "OK"},
        {"status": "OK", "data": {"min_salary": 0, "max_salary": 30000}},
        {"status": "OK", "data": {"min_salary": 25000, "max_salary": -1}},
        {"status": "OK", "data": {"min_salary": 25000, "max_salary": 30000, "salary_currency": "EUR"}},
        ["not", "a", "mapping"],
    ],
)
def test_unusable_responses_are_discarded(payload) -> None:
    assert _parse(payload) is None


@pytest.mark.parametrize(
    "raw, expected",
    [("VERY_HIGH", "high"), ("HIGH", "high"), ("MEDIUM", "medium"), ("LOW", "low"), (None, "low")],
)
def test_confidence_collapse(raw, expected) -> None:
    assert collapse_confidence(raw).value == expected


def test_api_fetch_sends_company_qualified_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_payload())

    api = SalaryEstimationApi(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))

    record = api.fetch("Gong", "Data Scientist")

    assert record is not None
    (request,) = seen
    assert request.url.host == "salary.example.test"
    assert request.url.path == "/salary-estimation"
    assert request.url.params["job_title"] == "Data Scientist Gong"
    assert request.url.params["location"] == "Israel"
    assert request.url.params["years_of_experience"] == "ALL"
    assert request.headers["X-RapidAPI-Key"] == "test-key"


def test_api_fetch_swallows_http_errors() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(429, json={"message": "rate limited"}))
    api = SalaryEstimationApi(_settings(), client=httpx.Client(transport=transport))

    assert api.fetch("Gong", "Data Scientist") is None


def test_api_without_key_makes_no_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    api = SalaryEstimationApi(_settings(api_key=None), client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert api.fetch("Gong", "Data Scientist") is None


def test_parse_salary_range_from_page_text() -> None:
    html = "<html><body><div>Average pay</div><span>₪28,000 – ₪41,500</span> /mo</body></html>"

    assert parse_salary_range(html) == (28000, 41500)


def test_parse_salary_range_without_match() -> None:
    assert parse_salary_range("<p>Sign in to see salaries</p>") is None


def test_scraper_builds_low_confidence_record() -> None:
    html = "<span>₪ 22,000 - 30,000</span>"
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, text=html)))

    record = GlassdoorScraper(client=client).fetch("Wix", "QA Engineer")

    assert (record.min_salary, record.max_salary) == (22000, 30000)
    assert record.sample_count == 0
    assert record.confidence == "low"
    assert record.source == "scraped"


def test_scraper_failure_is_silent() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(403, text="blocked")))

    assert GlassdoorScraper(client=client).fetch("Wix", "QA Engineer") is None


class _FakeApi:
    def __init__(self, enabled: bool = True, empty_for: set[str] | None = None) -> None:
        self.enabled = enabled
        self.calls: list[tuple[str, str]] = []
        self._empty_for = empty_for or set()

    def fetch(self, company, title=None):
        self.calls.append((company, title))
        if company in self._empty_for:
            return None
        payload = _payload(job_title=title)
        return parse_estimation_response(payload, company=company, search_title=title, exchange_rates=RATES)


def test_batch_runs_titles_then_companies_with_delay(session) -> None:
    sleeps: list[float] = []
    api = _FakeApi()
    batch = ExternalFetchBatch(
        api,
        SalaryRecordRepository(session),
        delay_seconds=1.5,
        titles=["Software Engineer", "QA Engineer"],
        companies=["Wix", "Gong"],
        sleep=sleeps.append,
    )

    stored = batch.run()

    assert stored == 4
    assert api.calls == [
        ("", "Software Engineer"),
        ("", "QA Engineer"),
        ("Wix", "Software Engineer"),
        ("Gong", "Software Engineer"),
    ]
    assert sleeps == [1.5] * 4
    repo = SalaryRecordRepository(session)
    assert repo.find("general", "qa engineer") is not None
    assert repo.find("gong") is not None


def test_batch_counts_failures_and_continues(session) -> None:
    sleeps: list[float] = []
    batch = ExternalFetchBatch(
        _FakeApi(empty_for={"Wix"}),
        SalaryRecordRepository(session),
        titles=[],
        companies=["Wix", "Gong"],
        sleep=sleeps.append,
    )

    assert batch.run() == 1
    assert len(sleeps) == 2


def test_batch_without_api_key_is_skipped(session) -> None:
    sleeps: list[float] = []
    api = _FakeApi(enabled=False)
    batch = ExternalFetchBatch(api, SalaryRecordRepository(session), sleep=sleeps.append)

    assert batch.run() == 0
    assert api.calls == []
    assert sleeps == []


def test_fetch_pair_falls_back_to_scraper(session) -> None:
    html = "<span>₪25,000-₪33,000</span>"
    scraper = GlassdoorScraper(
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, text=html)))
    )
    batch = ExternalFetchBatch(
        _FakeApi(empty_for={"Wix"}), SalaryRecordRepository(session), scraper=scraper, sleep=lambda _: None
    )

    record = batch.fetch_pair("Wix", "Software Engineer")

    assert record.source == "scraped"
    assert record.min_salary == 25000


def test_parse_salary_range_ignores_digitless_amounts() -> None:
    assert parse_salary_range("<p>Pay: ₪, - ₪30,000</p>") is None
    assert parse_salary_range("<p>₪, - ₪,</p>") is None


class _BrokenScraper:
    def fetch(self, company, title):
        raise RuntimeError("layout changed")


def test_scrape_problems_never_interrupt_the_batch(session) -> None:
    page = "<p>Pay: ₪, - ₪30,000</p>"
    scraper = GlassdoorScraper(
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, text=page)))
    )
    api = _FakeApi(empty_for={"Wix", "Gong"})
    batch = ExternalFetchBatch(
        api, SalaryRecordRepository(session), scraper=scraper, titles=[], companies=["Wix", "Gong"], sleep=lambda _: None
    )

    assert batch.run() == 0
    assert [company for company, _ in api.calls] == ["Wix", "Gong"]


def test_fetch_pair_contains_scraper_exceptions(session) -> None:
    batch = ExternalFetchBatch(
        _FakeApi(empty_for={"Wix"}), SalaryRecordRepository(session), scraper=_BrokenScraper(), sleep=lambda _: None
    )

    assert batch.fetch_pair("Wix", "Software Engineer") is None
