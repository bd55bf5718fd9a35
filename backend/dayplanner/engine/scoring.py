"""
Score aggregation rules — pure functions, no DB access.
"""
from datetime import date, datetime
from typing import Iterable

from .dates import to_day

DEFAULT_TASK_POINTS = 10


def task_points(task: dict) -> int:
    """
    Points a task is worth; tasks stored without points count as 10.
    Stored points are ints: imports go through the strict TaskRecord model.
    """
    points = task.get("points")
    return DEFAULT_TASK_POINTS if points is None else points


def compute_day_tasks(tasks: Iterable[dict], day: date | datetime | str) -> tuple[list[dict], int]:
    """
    Returns (tasks_on_day, points_total).
    Tasks keep their collection order; only completed ones are scored.
    """
    target = to_day(day)
    day_tasks = [t for t in tasks if to_day(t["date"]) == target]
    total = sum(task_points(t) for t in day_tasks if t.get("completed"))
    return day_tasks, total


def compute_total_score(tasks: Iterable[dict]) -> int:
    return sum(task_points(t) for t in tasks if t.get("completed"))


def day_progress(day_tasks: list[dict]) -> tuple[int, int]:
    """Returns (completed_count, total_count) for a day's task list."""
    done = sum(1 for t in day_tasks if t.get("completed"))
    return done, len(day_tasks)


def total_questions(entries: Iterable[dict]) -> int:
    """Problems solved across all completed LeetCode entries."""
    return sum(e.get("question_count") or 0 for e in entries if e.get("completed"))
