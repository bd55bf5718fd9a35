"""
State transitions for task and LeetCode collections.

Every function returns a new record or collection; inputs are never
mutated, so the caller can persist the returned value wholesale.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Optional

from .dates import format_day_key, is_future, to_day
from .scoring import DEFAULT_TASK_POINTS

TOGGLED = "toggled"
CREATED = "created"
UPDATED = "updated"
FUTURE = "future"
NOT_FOUND = "not_found"

FUTURE_WARNING = "You cannot complete tasks in the future!"
MAX_QUESTION_COUNT = 99999


@dataclass
class ToggleResult:
    outcome: str                 # one of TOGGLED | CREATED | UPDATED | FUTURE | NOT_FOUND
    records: list[dict]          # collection after the transition
    record: Optional[dict] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.outcome in (TOGGLED, CREATED, UPDATED)


def can_toggle(record: dict, now: date | datetime) -> bool:
    """A record dated after today can't be toggled, whatever its state."""
    return not is_future(record["date"], now)


def toggle(record: dict) -> dict:
    return {**record, "completed": not record.get("completed")}


def _same_id(record: dict, record_id: Any) -> bool:
    # ids arrive as path strings but may be stored as ints from older exports
    return str(record.get("id")) == str(record_id)


def _replace(records: list[dict], updated: dict) -> list[dict]:
    return [updated if _same_id(r, updated["id"]) else r for r in records]


def _rejected(records: list[dict], record: Optional[dict] = None) -> ToggleResult:
    return ToggleResult(FUTURE, list(records), record, [FUTURE_WARNING])


# ── Tasks ─────────────────────────────────────────────────────────────────────

def find_task(tasks: list[dict], task_id: Any) -> Optional[dict]:
    return next((t for t in tasks if _same_id(t, task_id)), None)


def add_task(
    tasks: list[dict],
    text: str,
    day: date | datetime | str,
    record_id: Any,
    points: int = DEFAULT_TASK_POINTS,
) -> list[dict]:
    text = (text or "").strip()
    if not text:
        raise ValueError("task text must not be empty")
    task = {
        "id": record_id,
        "text": text,
        "date": format_day_key(day),
        "completed": False,
        "points": points,
    }
    return [*tasks, task]


def delete_task(tasks: list[dict], task_id: Any) -> list[dict]:
    return [t for t in tasks if not _same_id(t, task_id)]


def toggle_task(tasks: list[dict], task_id: Any, now: date | datetime) -> ToggleResult:
    task = find_task(tasks, task_id)
    if task is None:
        return ToggleResult(NOT_FOUND, list(tasks))
    if not can_toggle(task, now):
        return _rejected(tasks, task)
    updated = toggle(task)
    return ToggleResult(TOGGLED, _replace(tasks, updated), updated)


# ── LeetCode entries ──────────────────────────────────────────────────────────

def find_entry_for_day(entries: list[dict], day: date | datetime | str) -> Optional[dict]:
    """First entry on the given day; entries are assumed unique per day."""
    target = to_day(day)
    return next((e for e in entries if to_day(e["date"]) == target), None)


def toggle_leetcode_entry(entry: dict) -> dict:
    """
    Flip completion. Checking keeps a positive count or starts it at 1;
    unchecking resets the count to 0.
    """
    updated = toggle(entry)
    if updated["completed"]:
        count = entry.get("question_count") or 0
        updated["question_count"] = count if count > 0 else 1
    else:
        updated["question_count"] = 0
    return updated


def _new_entry(day, record_id: Any, count: int) -> dict:
    return {
        "id": record_id,
        "date": format_day_key(day),
        "completed": True,
        "question_count": count if count > 0 else 1,
    }


def toggle_leetcode_day(
    entries: list[dict],
    day: date | datetime | str,
    now: date | datetime,
    record_id: Any,
) -> ToggleResult:
    """Toggle the day's entry, or create a completed one when the day has none."""
    if is_future(day, now):
        return _rejected(entries)
    entry = find_entry_for_day(entries, day)
    if entry is None:
        created = _new_entry(day, record_id, 1)
        return ToggleResult(CREATED, [*entries, created], created)
    updated = toggle_leetcode_entry(entry)
    return ToggleResult(TOGGLED, _replace(entries, updated), updated)


def set_question_count(
    entries: list[dict],
    day: date | datetime | str,
    count: int,
    now: date | datetime,
    record_id: Any,
) -> ToggleResult:
    """
    Set the problems-solved count for a day. An existing entry keeps its
    completion state; a day without an entry gets a completed one when
    count is positive.
    """
    if not 0 <= count <= MAX_QUESTION_COUNT:
        raise ValueError(f"question count must be between 0 and {MAX_QUESTION_COUNT}")
    if is_future(day, now):
        return _rejected(entries)
    entry = find_entry_for_day(entries, day)
    if entry is not None:
        updated = {**entry, "question_count": count}
        return ToggleResult(UPDATED, _replace(entries, updated), updated)
    if count > 0:
        created = _new_entry(day, record_id, count)
        return ToggleResult(CREATED, [*entries, created], created)
    return ToggleResult(UPDATED, list(entries))


def tracker_window(now: date | datetime) -> list[date]:
    """Every day from Jan 1 of last year through Dec 31 of next year."""
    year = to_day(now).year
    start = date(year - 1, 1, 1)
    end = date(year + 1, 12, 31)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
