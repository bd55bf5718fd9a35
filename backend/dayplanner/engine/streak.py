"""
Streak tracking — pure functions, no DB access.
"""
from datetime import date, datetime
from typing import Iterable

from .dates import previous_day, to_day


def completed_days(records: Iterable[dict], now: date | datetime) -> set[date]:
    """Distinct days with at least one completed record, future days dropped."""
    today = to_day(now)
    days = set()
    for record in records:
        if not record.get("completed"):
            continue
        day = to_day(record["date"])
        if day <= today:
            days.add(day)
    return days


def compute_streak(records: Iterable[dict], now: date | datetime) -> int:
    """
    Returns the number of consecutive days, ending today or yesterday,
    with at least one completed record. Used for tasks and LeetCode
    entries alike.
    """
    days = sorted(completed_days(records, now), reverse=True)
    if not days:
        return 0

    today = to_day(now)
    most_recent = days[0]
    if most_recent != today and most_recent != previous_day(today):
        return 0

    streak = 1
    for earlier, later in zip(days[1:], days):
        if earlier != previous_day(later):
            break
        streak += 1
    return streak
