"""Shared fixtures: in-memory SQLite schema and record builders."""
from __future__ import annotations

from pathlib import Path
import sys

import pytest
from sqlalchemy.orm import Session, sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from salary_engine.core.config import get_settings
from salary_engine.core.text import normalize
from salary_engine.db.session import build_sessionmaker
from salary_engine.models import Base
from salary_engine.repositories import SalaryRecordData


def make_record(
    company: str = "Acme",
    title: str | None = "Software Engineer",
    *,
    min_salary: int = 20000,
    max_salary: int = 30000,
    median_salary: int | None = None,
    sample_count: int = 1,
    source: str = "external-api",
    confidence: str = "medium",
    location: str = "Israel",
) -> SalaryRecordData:
    return SalaryRecordData(
        company_name=company,
        company_name_normalized=normalize(company),
        job_title=title,
        job_title_normalized=normalize(title) or None,
        location=location,
        min_salary=min_salary,
        max_salary=max_salary,
        median_salary=median_salary if median_salary is not None else (min_salary + max_salary) // 2,
        sample_count=sample_count,
        source=source,
        confidence=confidence,
    )


@pytest.fixture
def session_factory() -> sessionmaker:
    factory = build_sessionmaker("sqlite:///:memory:")
    Base.metadata.create_all(factory.kw["bind"])
    return factory


@pytest.fixture
def session(session_factory: sessionmaker) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
