"""Display helpers for monthly/annual salary ranges."""

from __future__ import annotations

import math
from urllib.parse import quote

CURRENCY_SYMBOLS = {"ILS": "₪", "USD": "$", "EUR": "€"}


def _short_amount(value: int | float, *, allow_millions: bool = False) -> str:
    if allow_millions and value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{int(value / 1000 + 0.5)}K"
    return f"{int(value):,}"


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def format_monthly_range(min_monthly: int, max_monthly: int, currency: str = "ILS") -> str:
    """Render e.g. ``₪22K - ₪44K/mo``."""

    symbol = currency_symbol(currency)
    return f"{symbol}{_short_amount(min_monthly)} - {symbol}{_short_amount(max_monthly)}/mo"


def format_annual_range(min_annual: int, max_annual: int, currency: str = "ILS") -> str:
    """Render e.g. ``₪264K - ₪1.2M/yr``."""

    symbol = currency_symbol(currency)
    low = _short_amount(min_annual, allow_millions=True)
    high = _short_amount(max_annual, allow_millions=True)
    return f"{symbol}{low} - {symbol}{high}/yr"


def glassdoor_search_url(title: str, company: str) -> str:
    keyword = quote(f"{title} {company}", safe="")
    return f"https://www.glassdoor.com/Search/results.htm?keyword={keyword}&locT=N&locId=120"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (not banker's rounding)."""

    return int(math.floor(value + 0.5))


def glassdoor_salaries_url(title: str, location: str = "israel") -> str:
    slug = quote(title.strip().replace(" ", "-"), safe="-")
    return f"https://www.glassdoor.com/Salaries/{slug}-{location.lower()}-salaries"
