"""Normalisation and seniority classification for company and title strings."""
from __future__ import annotations

import re
from enum import Enum

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


class Seniority(str, Enum):
    """Seniority tiers used to index the survey table."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    STAFF = "staff"
    MANAGER = "manager"
    DIRECTOR = "director"


# Highest tier first; the first tier with a matching keyword wins.
_SENIORITY_KEYWORDS: tuple[tuple[Seniority, tuple[str, ...]], ...] = (
    (Seniority.DIRECTOR, ("director", "head of", "vp", "chief")),
    (Seniority.MANAGER, ("manager", "team lead")),
    (Seniority.STAFF, ("staff", "principal", "architect")),
    (Seniority.SENIOR, ("senior", "sr.", "sr ")),
    (Seniority.JUNIOR, ("junior", "jr.", "jr ", "intern", "entry")),
)


def normalize(value: str | None) -> str:
    """Lower-case, trim, drop anything outside ``[a-z0-9\\s]`` and collapse spaces.

    ``None`` normalises to the empty string so callers can pass optional
    titles straight through.
    """

    if not value:
        return ""
    cleaned = _NON_ALNUM.sub("", value.lower().strip())
    return _WHITESPACE.sub(" ", cleaned).strip()


def classify_seniority(title: str | None) -> Seniority:
    """Map a free-text job title onto a :class:`Seniority` tier (default ``mid``)."""

    title_lower = (title or "").lower()
    for tier, keywords in _SENIORITY_KEYWORDS:
        if any(keyword in title_lower for keyword in keywords):
            return tier
    return Seniority.MID


def fuzzy_contains(left: str, right: str) -> bool:
    """Two-way substring test used for company matching.

    An empty side never matches, so a blank or punctuation-only company name
    resolves to no survey entry and no company multiplier instead of the first
    table entry (every string contains ""). Otherwise the loose two-way rule is
    kept as is: short names can still cross-match longer ones ("ey" inside
    "honey").
    """

    if not left or not right:
        return False
    return left in right or right in left
