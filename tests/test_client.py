from __future__ import annotations

import json

import httpx

from salary_engine.client import CachedSalaryClient, EstimateCache, SalaryApiClient, estimate_salary
from salary_engine.schemas import EstimateSource, SalaryEstimate


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _estimate(source: EstimateSource = EstimateSource.DATABASE) -> SalaryEstimate:
    return SalaryEstimate(min=30000, max=42000, source=source, confidence="high")


def _api(responses: list[httpx.Response], seen: list[dict]) -> SalaryApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return responses.pop(0)

    return SalaryApiClient("http://engine.test/", client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_cache_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = EstimateCache(ttl_seconds=600, clock=clock)
    cache.put("Wix", "QA Engineer", _estimate())

    clock.now += 599
    assert cache.get("wix", "qa  engineer") == _estimate()
    clock.now += 1
    assert cache.get("Wix", "QA Engineer") is None


def test_cached_client_serves_repeat_lookups_from_memory() -> None:
    seen: list[dict] = []
    body = _estimate().model_dump(mode="json")
    client = CachedSalaryClient(
        _api([httpx.Response(200, json=body)], seen), EstimateCache(ttl_seconds=600, clock=FakeClock())
    )

    first = client.estimate("Wix", "QA Engineer", "Engineer", "qa", "l")
    second = client.estimate("WIX", "QA Engineer!")

    assert first == second == _estimate()
    assert len(seen) == 1
    assert seen[0]["company"] == "Wix"
    assert seen[0]["size"] == "l"
    assert client.has_database_data("Wix", "QA Engineer")


def test_cached_client_refetches_after_expiry() -> None:
    seen: list[dict] = []
    clock = FakeClock()
    body = _estimate(EstimateSource.COMPUTED).model_dump(mode="json")
    client = CachedSalaryClient(
        _api([httpx.Response(200, json=body), httpx.Response(200, json=body)], seen),
        EstimateCache(ttl_seconds=60, clock=clock),
    )

    client.estimate("Gong", "Data Scientist")
    clock.now += 61
    client.estimate("Gong", "Data Scientist")

    assert len(seen) == 2
    assert not client.has_database_data("Gong", "Data Scientist")


def test_failed_request_returns_none_and_is_not_cached() -> None:
    seen: list[dict] = []
    body = _estimate().model_dump(mode="json")
    client = CachedSalaryClient(
        _api([httpx.Response(500), httpx.Response(200, json=body)], seen),
        EstimateCache(ttl_seconds=600, clock=FakeClock()),
    )

    assert client.estimate("Wix", "QA Engineer") is None
    assert client.estimate("Wix", "QA Engineer") == _estimate()
    assert len(seen) == 2


def test_local_estimate_reports_monthly_and_annual() -> None:
    result = estimate_salary(
        {"company": "Acme Widgets", "title": "Software Engineer", "level": "Engineer", "job_category": "software", "size": "m"}
    )

    assert (result["min_monthly"], result["max_monthly"]) == (22000, 44000)
    assert (result["min_annual"], result["max_annual"]) == (264000, 528000)
    assert result["confidence"] == "high"
    assert result["monthly_display"] == "₪22K - ₪44K/mo"
    assert result["annual_display"] == "₪264K - ₪528K/yr"
