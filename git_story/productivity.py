from __future__ import annotations

from typing import Iterable, List

from .models import ActivityEvent, Productivity

DEFAULT_PEAK_HOUR = 14


def hour_histogram(events: Iterable[ActivityEvent]) -> List[int]:
    buckets = [0] * 24
    for event in events:
        buckets[event.timestamp.hour] += 1
    return buckets


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "Morning"
    if 12 <= hour < 17:
        return "Afternoon"
    if 17 <= hour < 21:
        return "Evening"
    return "Late Night"


def calculate_productivity(histogram: List[int]) -> Productivity:
    peak_hour = DEFAULT_PEAK_HOUR
    max_count = 0
    for hour, count in enumerate(histogram):
        if count > max_count:
            max_count = count
            peak_hour = hour
    return Productivity(time_of_day=time_of_day(peak_hour), peak_hour=peak_hour)
