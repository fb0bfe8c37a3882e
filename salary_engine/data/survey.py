"""Static survey table: per-company monthly ILS ranges for each seniority tier.

Figures come from 2024-2025 Israeli tech salary surveys (Startup Nation,
Globes, LinkedIn Israel). The table is built once at import into a read-only
mapping keyed by normalised company name; nothing mutates it afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from salary_engine.core.formatting import round_half_up
from salary_engine.core.text import Seniority, fuzzy_contains, normalize

SURVEY_SAMPLE_WEIGHT = 10
SURVEY_LAST_UPDATED = "2025-01"


@dataclass(frozen=True, slots=True)
class SalaryRange:
    min: int
    max: int

    @property
    def midpoint(self) -> int:
        return round_half_up((self.min + self.max) / 2)


@dataclass(frozen=True, slots=True)
class SurveyEntry:
    """Survey ranges for one company, indexed by :class:`Seniority`."""

    company: str
    tiers: Mapping[Seniority, SalaryRange]
    last_updated: str = SURVEY_LAST_UPDATED

    def range_for(self, tier: Seniority) -> SalaryRange:
        return self.tiers[tier]


_TIER_ORDER = (
    Seniority.JUNIOR,
    Seniority.MID,
    Seniority.SENIOR,
    Seniority.STAFF,
    Seniority.MANAGER,
    Seniority.DIRECTOR,
)

# company: junior, mid, senior, staff, manager, director
_RAW_SURVEY: tuple[tuple[str, tuple[tuple[int, int], ...]], ...] = (
    ("google", ((28000, 38000), (38000, 52000), (52000, 72000), (72000, 95000), (55000, 80000), (85000, 120000))),
    ("meta", ((26000, 36000), (36000, 50000), (50000, 70000), (70000, 90000), (52000, 75000), (80000, 110000))),
    ("facebook", ((26000, 36000), (36000, 50000), (50000, 70000), (70000, 90000), (52000, 75000), (80000, 110000))),
    ("apple", ((27000, 37000), (37000, 50000), (50000, 68000), (68000, 88000), (52000, 75000), (82000, 115000))),
    ("amazon", ((24000, 32000), (32000, 45000), (45000, 62000), (62000, 80000), (48000, 70000), (75000, 100000))),
    ("microsoft", ((25000, 35000), (35000, 48000), (48000, 65000), (65000, 85000), (50000, 72000), (78000, 105000))),
    ("nvidia", ((28000, 38000), (38000, 52000), (52000, 72000), (72000, 95000), (55000, 80000), (85000, 120000))),
    ("wiz", ((28000, 38000), (38000, 55000), (55000, 75000), (75000, 95000), (55000, 80000), (85000, 115000))),
    ("monday", ((22000, 30000), (30000, 42000), (42000, 58000), (58000, 75000), (45000, 65000), (70000, 95000))),
    ("snyk", ((23000, 32000), (32000, 45000), (45000, 62000), (62000, 80000), (48000, 68000), (72000, 98000))),
    ("mobileye", ((24000, 32000), (32000, 45000), (45000, 60000), (60000, 78000), (48000, 68000), (72000, 95000))),
    ("wix", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 90000))),
    ("fiverr", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 70000), (42000, 60000), (62000, 85000))),
    ("check point", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
    ("palo alto", ((24000, 33000), (33000, 47000), (47000, 65000), (65000, 85000), (50000, 72000), (78000, 105000))),
    ("cyberark", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
    ("sentinelone", ((22000, 32000), (32000, 45000), (45000, 62000), (62000, 80000), (48000, 68000), (72000, 95000))),
    ("orca security", ((24000, 34000), (34000, 48000), (48000, 66000), (66000, 85000), (50000, 72000), (75000, 100000))),
    ("crowdstrike", ((24000, 33000), (33000, 47000), (47000, 65000), (65000, 82000), (50000, 70000), (75000, 100000))),
    ("intel", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 70000), (42000, 60000), (62000, 85000))),
    ("oracle", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("salesforce", ((22000, 30000), (30000, 42000), (42000, 58000), (58000, 75000), (45000, 65000), (68000, 92000))),
    ("nice", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("amdocs", ((17000, 24000), (24000, 35000), (35000, 48000), (48000, 62000), (38000, 55000), (55000, 78000))),
    ("payoneer", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("rapyd", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
    ("tipalti", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("playtika", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("elbit", ((16000, 23000), (23000, 33000), (33000, 45000), (45000, 58000), (35000, 52000), (52000, 72000))),
    ("rafael", ((17000, 24000), (24000, 35000), (35000, 48000), (48000, 62000), (38000, 55000), (55000, 78000))),
    ("ai21", ((25000, 35000), (35000, 50000), (50000, 70000), (70000, 90000), (52000, 75000), (80000, 110000))),
    ("gong", ((24000, 33000), (33000, 47000), (47000, 65000), (65000, 85000), (50000, 72000), (78000, 105000))),
    ("jfrog", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
    ("appsflyer", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("similarweb", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("lightricks", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
    ("hibob", ((18000, 26000), (26000, 38000), (38000, 52000), (52000, 68000), (40000, 58000), (60000, 82000))),
    ("deel", ((22000, 32000), (32000, 45000), (45000, 62000), (62000, 80000), (48000, 68000), (72000, 95000))),
    ("papaya global", ((20000, 28000), (28000, 40000), (40000, 55000), (55000, 72000), (42000, 62000), (65000, 88000))),
)


def _build_survey() -> Mapping[str, SurveyEntry]:
    table: dict[str, SurveyEntry] = {}
    for company, ranges in _RAW_SURVEY:
        tiers = {
            tier: SalaryRange(min=low, max=high)
            for tier, (low, high) in zip(_TIER_ORDER, ranges)
        }
        table[normalize(company)] = SurveyEntry(company=company, tiers=MappingProxyType(tiers))
    return MappingProxyType(table)


SURVEY_TABLE: Mapping[str, SurveyEntry] = _build_survey()

# Title suffix stored for each tier when the survey is written to the record store.
TIER_TITLES: Mapping[Seniority, str] = MappingProxyType(
    {
        Seniority.JUNIOR: "Junior Software Engineer",
        Seniority.MID: "Mid-Level Software Engineer",
        Seniority.SENIOR: "Senior Software Engineer",
        Seniority.STAFF: "Staff Software Engineer",
        Seniority.MANAGER: "Manager Software Engineer",
        Seniority.DIRECTOR: "Director Software Engineer",
    }
)


def find_survey_entry(
    company: str, table: Mapping[str, SurveyEntry] = SURVEY_TABLE
) -> SurveyEntry | None:
    """Return the first survey entry whose key and ``company`` contain one another."""

    normalized = normalize(company)
    for key, entry in table.items():
        if fuzzy_contains(normalized, key):
            return entry
    return None
