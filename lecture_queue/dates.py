"""Publish-date inference from lecture titles.

Titles often carry the lecture date in one of a handful of shapes:
"15 March 2024", "Mar. 15, 24", "2024.03.15", "15/03/2024". Each shape is a
rule: a regex plus a constructor turning its match into a date. Rules are
tried in priority order and the first one that matches decides: a rule that
matches but names an impossible date (February 30) gives None, and later
rules are not consulted.

Dates are pinned to 12:00 UTC so that rendering them in any local timezone
lands on the same calendar day.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
    "january": 1, "february": 2, "march": 3, "april": 4, "maylong": 5,
    "june": 6, "july": 7, "august": 8, "september": 9, "october": 10,
    "november": 11, "december": 12,
}

_MONTH_NAME = (
    r"(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?"
    r"|Aug(?:ust)?|Sep(?:t|tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

_SEPARATORS_RE = re.compile(r"[._-]+")

DAY_MONTH_YEAR_RE = re.compile(
    r"\b(\d{1,2})\s*" + _MONTH_NAME + r"\.?,?\s*(\d{2,4})\b",
    re.IGNORECASE | re.ASCII,
)
MONTH_DAY_YEAR_RE = re.compile(
    r"\b" + _MONTH_NAME + r"\.?\s+(\d{1,2}),?\s+(\d{2,4})\b",
    re.IGNORECASE | re.ASCII,
)
YEAR_MONTH_DAY_RE = re.compile(
    r"\b(20\d{2}|19\d{2})[./-](\d{1,2})[./-](\d{1,2})\b",
    re.ASCII,
)
SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{2,4})\b", re.ASCII)


def month_index(name: str) -> int | None:
    """1-based month number for a month name or abbreviation."""
    name = name.lower()
    if name == "may":
        return 5
    return MONTHS.get(name)


def expand_year(year: str) -> int:
    """Two-digit years 00-49 are 20xx, 50-99 are 19xx; others are taken as-is."""
    value = int(year)
    if len(year) == 2:
        return 2000 + value if value < 50 else 1900 + value
    return value


def to_iso(dt: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_noon(year: str, month: int, day: int) -> str | None:
    """ISO string for the given date at 12:00 UTC, or None if it is not a real date."""
    try:
        dt = datetime(expand_year(year), month, day, 12, tzinfo=timezone.utc)
    except ValueError:
        return None
    return to_iso(dt)


# Returned by a rule whose regex matched but cannot apply; the next rule is tried.
SKIP = object()


def _day_month_year(m: re.Match):
    month = month_index(m.group(2))
    if month is None:
        return SKIP
    return utc_noon(m.group(3), month, int(m.group(1)))


def _month_day_year(m: re.Match):
    month = month_index(m.group(1))
    if month is None:
        return SKIP
    return utc_noon(m.group(3), month, int(m.group(2)))


def _year_month_day(m: re.Match) -> str | None:
    month = max(1, min(12, int(m.group(2))))
    return utc_noon(m.group(1), month, int(m.group(3)))


def _slash_date(m: re.Match):
    a, b = int(m.group(1)), int(m.group(2))
    if a > 12:
        day, month = a, b
    elif b > 12:
        day, month = b, a
    else:
        day, month = a, b
    if not 1 <= month <= 12:
        return SKIP
    return utc_noon(m.group(3), month, day)


# (pattern, constructor, matches against the unreplaced title)
Rule = tuple[re.Pattern, Callable[[re.Match], object], bool]

RULES: list[Rule] = [
    (DAY_MONTH_YEAR_RE, _day_month_year, False),
    (MONTH_DAY_YEAR_RE, _month_day_year, False),
    (YEAR_MONTH_DAY_RE, _year_month_day, True),
    (SLASH_DATE_RE, _slash_date, False),
]


def date_from_title(title: object) -> str | None:
    """Infer a publish date from a title.

    Returns an ISO-8601 string such as "2024-03-15T12:00:00.000Z", or None
    when no rule matches or the matching rule names an impossible date.
    """
    raw = str(title)
    normalized = _SEPARATORS_RE.sub(" ", raw)
    for pattern, build, use_raw in RULES:
        match = pattern.search(raw if use_raw else normalized)
        if match is None:
            continue
        result = build(match)
        if result is SKIP:
            continue
        return result
    return None
