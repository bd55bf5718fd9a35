"""
Print streaks and scores for a planner document, recomputed from the
stored records. Read-only; safe to run at any time.

Usage:
    cd backend
    SUPABASE_URL=... SUPABASE_SERVICE_KEY=... python scripts/streak_report.py [user_id]

A .env file in the working directory is loaded first.
"""
import os
import sys
from datetime import date

from dotenv import load_dotenv

# Add project root to path so we can import engine modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dayplanner.db import get_client, get_document
from dayplanner.engine.dates import format_day_key
from dayplanner.engine.streak import compute_streak
from dayplanner.engine.scoring import compute_day_tasks, compute_total_score, total_questions


def build_report(document: dict, today: date) -> dict:
    tasks = document["tasks"]
    entries = document["leetcode_tasks"]
    today_tasks, today_score = compute_day_tasks(tasks, today)
    return {
        "date": format_day_key(today),
        "tasks": len(tasks),
        "streak": compute_streak(tasks, today),
        "total_score": compute_total_score(tasks),
        "today_tasks": len(today_tasks),
        "today_score": today_score,
        "leetcode_entries": len(entries),
        "leetcode_streak": compute_streak(entries, today),
        "total_questions": total_questions(entries),
    }


def main(argv: list[str]) -> int:
    load_dotenv()
    user_id = argv[1] if len(argv) > 1 else os.environ.get("PLANNER_USER_ID", "default")

    document = get_document(get_client(), user_id)
    report = build_report(document, date.today())

    print(f"Report for {user_id} on {report['date']}")
    width = max(len(k) for k in report)
    for key, value in report.items():
        if key != "date":
            print(f"  {key:<{width}}  {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
