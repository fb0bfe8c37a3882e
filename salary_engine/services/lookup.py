"""Read-side queries over the record store."""
from __future__ import annotations

from salary_engine.core.text import normalize
from salary_engine.models import SalaryRecord, SalarySource
from salary_engine.repositories import SalaryRecordRepository
from salary_engine.schemas import CompanySalaries, SalaryRecordOut, SalaryStats


class SalaryLookupService:
    def __init__(self, repository: SalaryRecordRepository) -> None:
        self._repository = repository

    def lookup(self, company: str, title: str | None = None) -> SalaryRecord | None:
        """Title-scoped match first; a miss falls back to the best company-only record."""

        company_normalized = normalize(company)
        title_normalized = normalize(title) or None
        record = self._repository.find(company_normalized, title_normalized)
        if record is None and title_normalized:
            record = self._repository.find(company_normalized)
        return record

    def company_salaries(self, company: str) -> CompanySalaries:
        records = self._repository.find_all_for_company(normalize(company))
        return CompanySalaries(
            company=company,
            salaries=[SalaryRecordOut.model_validate(record) for record in records],
            count=len(records),
        )

    def stats(self) -> SalaryStats:
        raw = self._repository.stats()
        by_source = {source.value: 0 for source in SalarySource}
        by_source.update(raw.by_source)
        return SalaryStats(
            total_entries=raw.total_entries,
            unique_companies=raw.unique_companies,
            by_source=by_source,
            last_fetch=raw.last_fetch,
        )
