"""Recurrence rules for assignment templates.

Rules are parsed once from their text form when templates are loaded and are
then resolved per calendar date with :func:`applies_on`.  Resolution is total:
a malformed rule simply never applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum, IntEnum
from typing import Iterable


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class Weekday(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def short_name(self) -> str:
        return self.name[:3].capitalize()

    @classmethod
    def from_token(cls, token: str) -> "Weekday":
        cleaned = token.strip().lower()
        for member in cls:
            if cleaned in (member.name.lower(), member.name[:3].lower()):
                return member
        raise ValueError(f"Unknown weekday token '{token}'")

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())


def parse_weekdays(text: str) -> frozenset[Weekday]:
    """Parse ``mon,wed,fri`` or ``mon-fri`` style weekday lists."""

    days: set[Weekday] = set()
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        if "-" in chunk:
            first, last = (Weekday.from_token(part) for part in chunk.split("-", 1))
            span = (last - first) % 7
            days.update(Weekday((first + offset) % 7) for offset in range(span + 1))
        else:
            days.add(Weekday.from_token(chunk))
    return frozenset(days)


def format_weekdays(days: Iterable[Weekday]) -> str:
    return ",".join(day.short_name.lower() for day in sorted(days))


@dataclass(frozen=True, order=True)
class TimeOfDay:
    hour: int
    minute: int = 0

    @classmethod
    def parse(cls, text: str) -> "TimeOfDay":
        hour_text, _, minute_text = text.strip().partition(":")
        value = cls(int(hour_text), int(minute_text or 0))
        if not value.is_valid():
            raise ValueError(f"Time of day out of range: '{text}'")
        return value

    def is_valid(self) -> bool:
        return 0 <= self.hour < 24 and 0 <= self.minute < 60

    def as_time(self) -> time:
        return time(self.hour, self.minute)

    def on(self, day: date) -> datetime:
        return datetime.combine(day, self.as_time())

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: Frequency
    weekdays: frozenset[Weekday] = field(default_factory=frozenset)
    time_of_day: TimeOfDay | None = None
    starts_on: date | None = None
    until: date | None = None
    interval: int = 1


def _is_well_formed(rule: RecurrenceRule) -> bool:
    if not isinstance(rule.frequency, Frequency):
        return False
    if rule.interval < 1:
        return False
    if rule.frequency is Frequency.WEEKLY and not rule.weekdays:
        return False
    if rule.interval > 1 and rule.starts_on is None:
        return False
    if rule.starts_on and rule.until and rule.until < rule.starts_on:
        return False
    return True


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def applies_on(rule: RecurrenceRule | None, day: date) -> bool:
    """Return ``True`` when *rule* schedules work on *day*."""

    if rule is None or not _is_well_formed(rule):
        return False
    if rule.starts_on and day < rule.starts_on:
        return False
    if rule.until and day > rule.until:
        return False
    if rule.weekdays and Weekday.of(day) not in rule.weekdays:
        return False
    if rule.interval > 1:
        weeks = (_week_start(day) - _week_start(rule.starts_on)).days // 7
        if weeks % rule.interval:
            return False
    return True


def time_of_day(rule: RecurrenceRule | None) -> TimeOfDay | None:
    if rule is None or rule.time_of_day is None or not rule.time_of_day.is_valid():
        return None
    return rule.time_of_day


def parse_rule(text: str) -> RecurrenceRule:
    """
    Parse the compact rule syntax::

        <frequency>[:<days>][@HH:MM][;from=YYYY-MM-DD][;until=YYYY-MM-DD][;every=N]

    e.g. ``daily:mon-fri@06:00`` or ``weekly:fri;every=2;from=2026-01-02``.
    Raises ``ValueError`` for anything it cannot read.
    """

    head, *options = [part.strip() for part in text.strip().split(";")]
    if not head:
        raise ValueError("Empty recurrence rule")

    head, _, clock = head.partition("@")
    frequency_text, _, days_text = head.partition(":")
    try:
        frequency = Frequency(frequency_text.strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown frequency '{frequency_text}'") from exc

    weekdays = parse_weekdays(days_text) if days_text.strip() else frozenset()
    clock_value = TimeOfDay.parse(clock) if clock.strip() else None

    starts_on: date | None = None
    until: date | None = None
    interval = 1
    for option in options:
        if not option:
            continue
        key, _, value = option.partition("=")
        key = key.strip().lower()
        if key == "from":
            starts_on = date.fromisoformat(value.strip())
        elif key == "until":
            until = date.fromisoformat(value.strip())
        elif key == "every":
            interval = int(value)
        else:
            raise ValueError(f"Unknown recurrence option '{key}'")

    rule = RecurrenceRule(
        frequency=frequency,
        weekdays=weekdays,
        time_of_day=clock_value,
        starts_on=starts_on,
        until=until,
        interval=interval,
    )
    if not _is_well_formed(rule):
        raise ValueError(f"Recurrence rule '{text}' can never apply")
    return rule


def load_rule(text: str | None) -> RecurrenceRule | None:
    """Parse stored rule text, mapping unreadable rules to ``None``."""

    if not text:
        return None
    try:
        return parse_rule(text)
    except ValueError:
        return None


def format_rule(rule: RecurrenceRule) -> str:
    head = rule.frequency.value
    if rule.weekdays:
        head += f":{format_weekdays(rule.weekdays)}"
    if rule.time_of_day is not None:
        head += f"@{rule.time_of_day}"
    parts = [head]
    if rule.starts_on:
        parts.append(f"from={rule.starts_on.isoformat()}")
    if rule.until:
        parts.append(f"until={rule.until.isoformat()}")
    if rule.interval != 1:
        parts.append(f"every={rule.interval}")
    return ";".join(parts)


def describe_rule(rule: RecurrenceRule | None) -> str:
    if rule is None:
        return "Never"
    days = ", ".join(day.short_name for day in sorted(rule.weekdays))
    if rule.frequency is Frequency.DAILY:
        label = f"Daily ({days})" if days else "Daily"
    elif rule.interval > 1:
        label = f"Every {rule.interval} weeks on {days}"
    else:
        label = f"Weekly on {days}"
    if rule.time_of_day is not None:
        label += f" at {rule.time_of_day}"
    if rule.until:
        label += f" until {rule.until.isoformat()}"
    return label


__all__ = [
    "Frequency",
    "RecurrenceRule",
    "TimeOfDay",
    "Weekday",
    "applies_on",
    "describe_rule",
    "format_rule",
    "format_weekdays",
    "load_rule",
    "parse_rule",
    "parse_weekdays",
    "time_of_day",
]
