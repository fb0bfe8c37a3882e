"""HTTP client for the estimate endpoint with a short-lived in-memory cache.

Consumers (job boards, dashboards) call :class:`CachedSalaryClient` once per
job card; repeated views of the same (company, title) within the TTL are
served from memory without touching the network.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Mapping

import httpx

from salary_engine.core.config import get_settings
from salary_engine.core.formatting import format_annual_range, format_monthly_range
from salary_engine.core.log import get_logger
from salary_engine.core.text import normalize
from salary_engine.schemas import EstimateSource, SalaryEstimate
from salary_engine.services.estimation import compute_heuristic_estimate

LOGGER = get_logger(__name__)

CacheKey = tuple[str, str]


def cache_key(company: str | None, title: str | None) -> CacheKey:
    return normalize(company), normalize(title)


@dataclass(frozen=True)
class _Entry:
    value: SalaryEstimate
    stored_at: float


class EstimateCache:
    """TTL memoisation of resolver results.

    Entries expire by comparing timestamps on read; nothing is evicted
    actively, so size grows with the distinct pairs a session looks at.
    """

    def __init__(self, ttl_seconds: float = 600.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, _Entry] = {}

    def get(self, company: str | None, title: str | None) -> SalaryEstimate | None:
        entry = self._entries.get(cache_key(company, title))
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            return None
        return entry.value

    def put(self, company: str | None, title: str | None, value: SalaryEstimate) -> None:
        self._entries[cache_key(company, title)] = _Entry(value, self._clock())

    def __len__(self) -> int:
        return len(self._entries)


class SalaryApiClient:
    """Posts estimate requests to a running salary engine."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or get_settings().estimation.api_base_url).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def estimate(
        self,
        company: str,
        title: str,
        level: str | None = None,
        category: str | None = None,
        size: str | None = None,
    ) -> SalaryEstimate:
        payload = {"company": company, "title": title, "level": level, "category": category, "size": size}
        response = self._client.post(f"{self._base_url}/salaries/estimate", json=payload)
        response.raise_for_status()
        return SalaryEstimate.model_validate(response.json())


class CachedSalaryClient:
    def __init__(self, api: SalaryApiClient, cache: EstimateCache | None = None) -> None:
        self._api = api
        self._cache = cache or EstimateCache(get_settings().estimation.cache_ttl_seconds)

    def estimate(
        self,
        company: str,
        title: str,
        level: str | None = None,
        category: str | None = None,
        size: str | None = None,
    ) -> SalaryEstimate | None:
        """Cached estimate; ``None`` when the request fails (nothing is cached then)."""

        cached = self._cache.get(company, title)
        if cached is not None:
            return cached
        try:
            result = self._api.estimate(company, title, level, category, size)
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.error("Failed to fetch salary estimate for %s / %s: %s", company, title, exc)
            return None
        self._cache.put(company, title, result)
        return result

    def has_database_data(self, company: str, title: str) -> bool:
        cached = self._cache.get(company, title)
        return cached is not None and cached.is_resolved and cached.source is EstimateSource.DATABASE


def estimate_salary(job: Mapping[str, str | None]) -> dict[str, object]:
    """Offline heuristic estimate for a job listing dict.

    Reads ``company``, ``title``, ``level``, ``job_category`` and ``size`` and
    returns monthly and annual figures with display strings.
    """

    estimate = compute_heuristic_estimate(
        job.get("company"),
        job.get("title"),
        job.get("level"),
        job.get("job_category"),
        job.get("size"),
    )
    currency = get_settings().estimation.currency
    min_annual, max_annual = estimate.min * 12, estimate.max * 12
    return {
        "min_monthly": estimate.min,
        "max_monthly": estimate.max,
        "min_annual": min_annual,
        "max_annual": max_annual,
        "currency": currency,
        "confidence": estimate.confidence,
        "monthly_display": format_monthly_range(estimate.min, estimate.max, currency),
        "annual_display": format_annual_range(min_annual, max_annual, currency),
    }
