"""Record store: upsert and substring lookup over ``salary_data``."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from salary_engine.core.log import get_logger
from salary_engine.models import SalaryPeriod, SalaryRecord
from salary_engine.models.salary import utcnow

from .base import LIKE_ESCAPE, BaseRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SalaryRecordData:
    """Everything needed to write one record; the key is the first three fields."""

    company_name_normalized: str
    job_title_normalized: str | None
    location: str
    company_name: str
    job_title: str | None
    min_salary: int | None
    max_salary: int | None
    median_salary: int | None
    source: str
    confidence: str
    sample_count: int = 0
    currency: str = "ILS"
    salary_type: str = SalaryPeriod.MONTHLY.value
    source_url: str | None = None


@dataclass(frozen=True)
class RecordStats:
    total_entries: int
    unique_companies: int
    by_source: dict[str, int]
    last_fetch: datetime | None


class SalaryRecordRepository(BaseRepository):
    """Persistence for :class:`SalaryRecord` keyed by (company, title, location)."""

    _UPSERT_ATTEMPTS = 2

    def _select_by_key(self, company_normalized: str, title_normalized: str | None, location: str):
        title_clause = (
            SalaryRecord.job_title_normalized.is_(None)
            if title_normalized is None
            else SalaryRecord.job_title_normalized == title_normalized
        )
        return select(SalaryRecord).where(
            SalaryRecord.company_name_normalized == company_normalized,
            title_clause,
            SalaryRecord.location == location,
        )

    def get_by_key(
        self, company_normalized: str, title_normalized: str | None, location: str
    ) -> SalaryRecord | None:
        return self._guarded(
            "record lookup by key",
            lambda: self._session.execute(
                self._select_by_key(company_normalized, title_normalized, location)
            ).scalars().first(),
            None,
        )

    def upsert(self, data: SalaryRecordData) -> bool:
        """Insert or fully replace the record under ``data``'s key.

        A concurrent insert of the same key surfaces as an ``IntegrityError``;
        the write is retried once as an update so the last writer wins.
        """

        for attempt in range(1, self._UPSERT_ATTEMPTS + 1):
            try:
                self._write(data)
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                if attempt < self._UPSERT_ATTEMPTS:
                    LOGGER.debug("Upsert race on %s, retrying as update", data.company_name_normalized)
                    continue
                LOGGER.exception("Upsert failed for %s", data.company_name_normalized)
                return False
            except SQLAlchemyError:
                self._session.rollback()
                LOGGER.exception(
                    "Error storing salary data for %s %s", data.company_name, data.job_title or ""
                )
                return False
            LOGGER.debug("Stored salary data for %s %s", data.company_name, data.job_title or "")
            return True
        return False

    def _write(self, data: SalaryRecordData) -> None:
        record = self._session.execute(
            self._select_by_key(data.company_name_normalized, data.job_title_normalized, data.location)
        ).scalars().first()
        if record is None:
            record = SalaryRecord()
            self._session.add(record)
        for field_name, value in asdict(data).items():
            setattr(record, field_name, value)
        record.fetched_date = utcnow()
        self._session.flush()

    def find(self, company_normalized: str, title_normalized: str | None = None) -> SalaryRecord | None:
        """Best match by case-insensitive substring, highest ``sample_count`` first."""

        if not company_normalized:
            return None
        statement = select(SalaryRecord).where(
            SalaryRecord.company_name_normalized.ilike(
                self._contains_pattern(company_normalized), escape=LIKE_ESCAPE
            )
        )
        if title_normalized:
            statement = statement.where(
                SalaryRecord.job_title_normalized.ilike(
                    self._contains_pattern(title_normalized), escape=LIKE_ESCAPE
                )
            )
        statement = statement.order_by(SalaryRecord.sample_count.desc(), SalaryRecord.id).limit(1)
        return self._guarded(
            "record find",
            lambda: self._session.execute(statement).scalars().first(),
            None,
        )

    def find_all_for_company(self, company_normalized: str) -> list[SalaryRecord]:
        if not company_normalized:
            return []
        statement = (
            select(SalaryRecord)
            .where(
                SalaryRecord.company_name_normalized.ilike(
                    self._contains_pattern(company_normalized), escape=LIKE_ESCAPE
                )
            )
            .order_by(SalaryRecord.job_title)
        )
        return self._guarded(
            "company records",
            lambda: list(self._session.execute(statement).scalars().all()),
            [],
        )

    def has_company(self, company_normalized: str) -> bool:
        """Exact (not substring) check used to skip companies that already have data."""

        statement = (
            select(SalaryRecord.id)
            .where(SalaryRecord.company_name_normalized == company_normalized)
            .limit(1)
        )
        return self._guarded(
            "company existence check",
            lambda: self._session.execute(statement).first() is not None,
            False,
        )

    def insert(self, data: SalaryRecordData) -> bool:
        """Plain insert; an existing key or any other store error yields ``False``."""

        def _insert() -> bool:
            self._session.add(
                SalaryRecord(**asdict(data), fetched_date=utcnow())
            )
            self._session.commit()
            return True

        return self._guarded(f"insert for {data.company_name}", _insert, False)

    def stats(self) -> RecordStats:
        def _collect() -> RecordStats:
            total = self._session.execute(select(func.count(SalaryRecord.id))).scalar()
            companies = self._session.execute(
                select(func.count(distinct(SalaryRecord.company_name_normalized)))
            ).scalar()
            by_source = {
                source: self._to_int(count)
                for source, count in self._session.execute(
                    select(SalaryRecord.source, func.count(SalaryRecord.id)).group_by(SalaryRecord.source)
                ).all()
            }
            last_fetch = self._session.execute(select(func.max(SalaryRecord.fetched_date))).scalar()
            return RecordStats(
                total_entries=self._to_int(total),
                unique_companies=self._to_int(companies),
                by_source=by_source,
                last_fetch=last_fetch,
            )

        return self._guarded("record stats", _collect, RecordStats(0, 0, {}, None))
