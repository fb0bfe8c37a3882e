"""Multiplier tables behind the computed salary estimate (monthly ILS).

Baselines follow the Israel Innovation Authority 2025 report and the
GotFriends 2026 survey (average tech salary roughly 32-40K/month); category,
size and company adjustments follow the Ethosia/GotFriends breakdowns and
public Glassdoor Israel data. All tables are read-only after import.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from salary_engine.core.formatting import round_half_up
from salary_engine.core.text import fuzzy_contains, normalize

from .survey import SalaryRange

DEFAULT_LEVEL = "Engineer"

LEVEL_BASE_RANGES: Mapping[str, SalaryRange] = MappingProxyType(
    {
        "Intern": SalaryRange(6000, 12000),
        "Engineer": SalaryRange(20000, 40000),
        "Manager": SalaryRange(38000, 60000),
        "Executive": SalaryRange(55000, 100000),
    }
)

CATEGORY_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "software": 1.1,
        "frontend": 1.05,
        "data-science": 1.2,
        "devops": 1.15,
        "security": 1.2,
        "product": 1.1,
        "design": 0.95,
        "qa": 0.9,
        "hr": 0.85,
        "marketing": 0.9,
        "sales": 0.95,
        "finance": 1.0,
        "legal": 1.0,
        "support": 0.8,
        "admin": 0.75,
        "business": 1.0,
        "hardware": 1.1,
        "procurement-operations": 0.85,
        "project-management": 0.95,
    }
)

# Checked in order; the first keyword group found in the lower-cased title wins.
TITLE_MULTIPLIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("senior", "sr."), 1.3),
    (("staff", "principal"), 1.5),
    (("lead", "tech lead"), 1.4),
    (("director",), 1.6),
    (("head of", "vp"), 1.8),
    (("junior", "jr."), 0.75),
)

# xs: 1-10, s: 11-50, m: 51-200, l: 201-1000, xl: 1001+ employees
SIZE_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {"xs": 0.85, "s": 0.9, "m": 1.0, "l": 1.1, "xl": 1.15}
)

_RAW_COMPANY_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    # top tier: FAANG and top-paying unicorns
    ("google", 1.55),
    ("meta", 1.5),
    ("facebook", 1.5),
    ("apple", 1.5),
    ("amazon", 1.4),
    ("microsoft", 1.45),
    ("nvidia", 1.55),
    ("netflix", 1.5),
    ("openai", 1.6),
    ("anthropic", 1.55),
    ("wiz", 1.45),
    # high tier: well-funded tech
    ("monday.com", 1.35),
    ("monday", 1.35),
    ("snyk", 1.35),
    ("datadog", 1.4),
    ("cloudflare", 1.35),
    ("stripe", 1.45),
    ("salesforce", 1.3),
    ("adobe", 1.3),
    ("intel", 1.25),
    ("qualcomm", 1.3),
    ("mobileye", 1.35),
    ("palo alto networks", 1.35),
    ("palo alto", 1.35),
    ("crowdstrike", 1.35),
    ("orca security", 1.35),
    ("orca", 1.35),
    ("gong", 1.35),
    ("deel", 1.3),
    ("rippling", 1.35),
    ("sentinelone", 1.3),
    ("zscaler", 1.3),
    ("armis", 1.3),
    ("axonius", 1.3),
    ("mellanox", 1.3),
    ("pagaya", 1.3),
    # mid-high tier
    ("wix", 1.25),
    ("fiverr", 1.25),
    ("check point", 1.25),
    ("checkpoint", 1.25),
    ("cyberark", 1.25),
    ("jfrog", 1.25),
    ("lightricks", 1.25),
    ("papaya global", 1.25),
    ("papaya", 1.25),
    ("rapyd", 1.25),
    ("cato networks", 1.25),
    ("cato", 1.25),
    ("ironsource", 1.25),
    ("unity", 1.25),
    ("broadcom", 1.25),
    ("oracle", 1.2),
    ("vmware", 1.2),
    ("cisco", 1.2),
    ("tower semiconductor", 1.2),
    ("tower", 1.2),
    ("similarweb", 1.2),
    ("playtika", 1.2),
    ("payoneer", 1.2),
    ("varonis", 1.2),
    ("nice", 1.2),
    ("tipalti", 1.2),
    ("appsflyer", 1.2),
    ("walkme", 1.2),
    ("hibob", 1.2),
    ("bob", 1.2),
    ("riskified", 1.2),
    ("forter", 1.2),
    ("rafael", 1.2),
    # mid tier
    ("ibm", 1.15),
    ("amdocs", 1.15),
    ("elbit", 1.15),
    ("elbit systems", 1.15),
    ("iai", 1.15),
    ("israel aerospace", 1.15),
    ("infinidat", 1.15),
    ("cellebrite", 1.15),
    ("outbrain", 1.15),
    ("taboola", 1.15),
    ("yotpo", 1.15),
    ("mckinsey", 1.15),
    ("audiocodes", 1.1),
    ("radware", 1.1),
    ("kaltura", 1.1),
    ("liveperson", 1.1),
    ("sapiens", 1.1),
    ("bcg", 1.1),
    ("bain", 1.1),
    ("allot", 1.05),
    ("gilat", 1.05),
    ("magic software", 1.05),
    # standard: services and consulting
    ("matrix", 1.0),
    ("ness", 1.0),
    ("accenture", 1.0),
    ("deloitte", 0.95),
    ("kpmg", 0.95),
    ("pwc", 0.95),
    ("ernst & young", 0.95),
    ("ey", 0.95),
)

COMPANY_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {normalize(name): multiplier for name, multiplier in _RAW_COMPANY_MULTIPLIERS}
)

# Company salary populator: base range by company size, before adjustments.
SIZE_BASE_RANGES: Mapping[str, SalaryRange] = MappingProxyType(
    {
        "xs": SalaryRange(15000, 28000),
        "s": SalaryRange(17000, 32000),
        "m": SalaryRange(20000, 38000),
        "l": SalaryRange(22000, 42000),
        "xl": SalaryRange(25000, 48000),
    }
)

INDUSTRY_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "AI/ML": 1.25,
        "Cybersecurity": 1.2,
        "Fintech": 1.15,
        "Health": 1.1,
        "Semiconductors": 1.15,
        "Gaming": 1.05,
        "AdTech": 1.0,
        "Automotive": 1.1,
        "IoT": 1.05,
        "Aerospace": 1.15,
        "Productivity": 1.0,
        "Sustainable Technology": 1.0,
    }
)

# Exact-match table used by the populator (narrower than COMPANY_MULTIPLIERS).
HIGH_PAYING_COMPANIES: Mapping[str, float] = MappingProxyType(
    {
        normalize(name): multiplier
        for name, multiplier in (
            ("google", 1.5),
            ("meta", 1.45),
            ("apple", 1.45),
            ("microsoft", 1.4),
            ("amazon", 1.35),
            ("nvidia", 1.5),
            ("wiz", 1.45),
            ("snyk", 1.3),
            ("palo alto networks", 1.35),
            ("crowdstrike", 1.3),
            ("sentinelone", 1.25),
            ("orca security", 1.35),
            ("gong", 1.35),
            ("monday.com", 1.25),
            ("wix", 1.2),
            ("fiverr", 1.2),
            ("check point", 1.2),
            ("cyberark", 1.2),
            ("mobileye", 1.3),
            ("intel", 1.2),
            ("salesforce", 1.25),
            ("datadog", 1.35),
        )
    }
)


def title_multiplier(title: str | None) -> float:
    title_lower = (title or "").lower()
    for keywords, multiplier in TITLE_MULTIPLIERS:
        if any(keyword in title_lower for keyword in keywords):
            return multiplier
    return 1.0


def company_multiplier(
    company: str | None, table: Mapping[str, float] = COMPANY_MULTIPLIERS
) -> float:
    """Exact normalised match first, then the first two-way substring match, else 1.0."""

    normalized = normalize(company)
    if not normalized:
        return 1.0
    if normalized in table:
        return table[normalized]
    for known, multiplier in table.items():
        if fuzzy_contains(normalized, known):
            return multiplier
    return 1.0


def company_tier(company: str | None) -> str:
    multiplier = company_multiplier(company)
    if multiplier >= 1.4:
        return "top"
    if multiplier >= 1.2:
        return "high"
    if multiplier >= 1.05:
        return "mid"
    if multiplier >= 0.95:
        return "standard"
    return "below"


def round_to_thousand(value: float) -> int:
    """Round half up to the nearest thousand."""

    return round_half_up(value / 1000) * 1000
