from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Mapping, Sequence

from .models import CalendarSummary, Contribution, VelocityPoint

WEEKDAY_LABELS = ("Sundays", "Mondays", "Tuesdays", "Wednesdays", "Thursdays", "Fridays", "Saturdays")


def build_year_calendar(year: int, counts: Mapping[date, int] | None = None) -> List[Contribution]:
    """One Contribution per day of ``year``, zero-filled, with ``counts`` folded in."""
    counts = counts or {}
    day = date(year, 1, 1)
    end = date(year + 1, 1, 1)
    calendar: List[Contribution] = []
    while day < end:
        calendar.append(Contribution(date=day, count=max(0, int(counts.get(day, 0)))))
        day += timedelta(days=1)
    return calendar


def sunday_index(day: date) -> int:
    return (day.weekday() + 1) % 7


def longest_streak(counts: Sequence[int]) -> int:
    current = 0
    longest = 0
    for count in counts:
        if count > 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def weekday_totals(calendar: Sequence[Contribution]) -> List[int]:
    totals = [0] * 7
    for day in calendar:
        totals[sunday_index(day.date)] += day.count
    return totals


def busiest_weekday(totals: Sequence[int]) -> str:
    # max() keeps the first maximum, so ties go to the lowest index.
    index = max(range(len(WEEKDAY_LABELS)), key=lambda i: totals[i])
    return WEEKDAY_LABELS[index]


def velocity_series(calendar: Sequence[Contribution]) -> List[VelocityPoint]:
    return [VelocityPoint(label=f"{day.date:%b} {day.date.day}", commits=day.count) for day in calendar]


def summarize_calendar(year: int, counts: Dict[date, int]) -> CalendarSummary:
    calendar = build_year_calendar(year, counts)
    totals = weekday_totals(calendar)
    return CalendarSummary(
        contributions=tuple(calendar),
        total=sum(day.count for day in calendar),
        longest_streak=longest_streak([day.count for day in calendar]),
        weekday_stats=tuple(totals),
        busiest_day=busiest_weekday(totals),
        velocity=tuple(velocity_series(calendar)),
    )
