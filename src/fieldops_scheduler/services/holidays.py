"""Holidays on which municipal curbside collection does not run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable


@dataclass(frozen=True)
class Holiday:
    """Simple representation of a no-collection holiday."""

    code: str
    date: date
    name: str


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Return the *n*-th *weekday* (Monday is 0) of *month* in *year*."""

    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset, weeks=n - 1)


def _last_weekday(year: int, month: int, weekday: int) -> date:
    """Return the last *weekday* of *month* in *year*."""

    next_month = date(year + month // 12, month % 12 + 1, 1)
    last = next_month - timedelta(days=1)
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def get_sanitation_holidays(year: int) -> list[Holiday]:
    """Return the days in *year* without curbside collection."""

    return [
        Holiday("new_years_day", date(year, 1, 1), "New Year's Day"),
        Holiday("memorial_day", _last_weekday(year, 5, 0), "Memorial Day"),
        Holiday("independence_day", date(year, 7, 4), "Independence Day"),
        Holiday("labor_day", _nth_weekday(year, 9, 0, 1), "Labor Day"),
        Holiday("thanksgiving_day", _nth_weekday(year, 11, 3, 4), "Thanksgiving Day"),
        Holiday("christmas_day", date(year, 12, 25), "Christmas Day"),
    ]


def iter_sanitation_holidays(start_year: int, end_year: int) -> Iterable[Holiday]:
    """Yield holidays between *start_year* and *end_year* (inclusive)."""

    for year in range(start_year, end_year + 1):
        yield from get_sanitation_holidays(year)


@lru_cache(maxsize=32)
def sanitation_holiday_dates(year: int) -> frozenset[date]:
    return frozenset(holiday.date for holiday in get_sanitation_holidays(year))


def is_sanitation_holiday(day: date) -> bool:
    return day in sanitation_holiday_dates(day.year)


__all__ = [
    "Holiday",
    "get_sanitation_holidays",
    "is_sanitation_holiday",
    "iter_sanitation_holidays",
    "sanitation_holiday_dates",
]
