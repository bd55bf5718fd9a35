"""
Day Planner — FastAPI backend
"""
import hmac
import logging
import os
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import FastAPI, Header, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .db import (
    get_client, get_document, save_tasks, save_leetcode_tasks,
    save_profile_image, save_document, DOCUMENTS_TABLE,
)
from .engine.dates import MalformedDateError, format_day_key, parse_day_key
from .engine.streak import compute_streak
from .engine.scoring import compute_day_tasks, compute_total_score, day_progress, total_questions
from .engine.transitions import (
    NOT_FOUND, FUTURE, add_task, delete_task, find_task, toggle_task,
    toggle_leetcode_day, set_question_count, find_entry_for_day, tracker_window,
)
from .models import TaskCreate, QuestionCountPatch, ProfileImagePatch, PlannerExport

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
app = FastAPI(title="Day Planner API")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

ALLOWED_ORIGINS = [
    o.strip()
    for o in os.environ.get("PLANNER_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


async def _malformed_date_handler(request: Request, exc: MalformedDateError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


app.add_exception_handler(MalformedDateError, _malformed_date_handler)


@app.get("/health")
def health():
    try:
        db = get_client()
        db.table(DOCUMENTS_TABLE).select("user_id").limit(1).execute()
        return {"status": "ok", "db": "ok"}
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
        raise HTTPException(status_code=503, detail="DB unavailable")


# ── Config ────────────────────────────────────────────────────────────────────

def get_user_id() -> str:
    return os.environ.get("PLANNER_USER_ID", "default")


def get_admin_token() -> str:
    return os.environ.get("PLANNER_ADMIN_TOKEN", "")


def new_record_id() -> str:
    return uuid.uuid4().hex


# ── Auth ──────────────────────────────────────────────────────────────────────

def _is_admin_token(token: str) -> bool:
    expected = get_admin_token()
    return bool(expected) and hmac.compare_digest(token.encode(), expected.encode())


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")
    return authorization.removeprefix("Bearer ").strip()


def require_admin(token: str = Depends(get_bearer_token)) -> str:
    if not get_admin_token():
        raise HTTPException(status_code=503, detail="Admin access is not configured")
    if not _is_admin_token(token):
        raise HTTPException(status_code=403, detail="Read-only access")
    return token


@app.get("/api/session")
def get_session(authorization: Optional[str] = Header(None)):
    token = ""
    if authorization and authorization.startswith("Bearer "):
        token = authorization.removeprefix("Bearer ").strip()
    return {"is_admin": bool(token) and _is_admin_token(token)}


# ── Summary ───────────────────────────────────────────────────────────────────

@app.get("/api/summary")
def get_summary(day: Optional[str] = Query(None, alias="date")):
    """Header and day-planner figures for the selected day (default today)."""
    db = get_client()
    doc = get_document(db, get_user_id())
    today = date.today()
    selected = parse_day_key(day) if day else today

    day_tasks, day_score = compute_day_tasks(doc["tasks"], selected)
    completed_count, total_count = day_progress(day_tasks)

    return {
        "date": format_day_key(selected),
        "streak": compute_streak(doc["tasks"], today),
        "total_score": compute_total_score(doc["tasks"]),
        "leetcode_streak": compute_streak(doc["leetcode_tasks"], today),
        "profile_image": doc["profile_image"],
        "day": {
            "tasks": day_tasks,
            "score": day_score,
            "completed_count": completed_count,
            "total_count": total_count,
        },
    }


# ── Tasks ─────────────────────────────────────────────────────────────────────

@app.post("/api/tasks", status_code=201)
@limiter.limit("60/minute")
def create_task(request: Request, body: TaskCreate, _: str = Depends(require_admin)):
    db = get_client()
    user_id = get_user_id()
    doc = get_document(db, user_id)
    tasks = add_task(doc["tasks"], body.text, body.date, new_record_id(), body.points)
    save_tasks(db, user_id, tasks)
    logger.info("Task added for %s on %s", user_id, body.date)
    return {"status": "created", "task": tasks[-1]}


@app.post("/api/tasks/{task_id}/toggle")
@limiter.limit("60/minute")
def toggle_task_completion(request: Request, task_id: str, _: str = Depends(require_admin)):
    db = get_client()
    user_id = get_user_id()
    doc = get_document(db, user_id)
    result = toggle_task(doc["tasks"], task_id, date.today())

    if result.outcome == NOT_FOUND:
        raise HTTPException(status_code=404, detail="Task not found")
    if result.outcome == FUTURE:
        logger.info("Rejected toggle of future task %s (%s)", task_id, result.record["date"])
        raise HTTPException(status_code=409, detail=result.warnings[0])

    save_tasks(db, user_id, result.records)
    logger.info("Task %s toggled for %s: completed=%s", task_id, user_id, result.record["completed"])
    return {"status": result.outcome, "task": result.record}


@app.delete("/api/tasks/{task_id}")
@limiter.limit("60/minute")
def remove_task(request: Request, task_id: str, _: str = Depends(require_admin)):
    db = get_client()
    user_id = get_user_id()
    doc = get_document(db, user_id)
    if find_task(doc["tasks"], task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")
    save_tasks(db, user_id, delete_task(doc["tasks"], task_id))
    logger.info("Task %s deleted for %s", task_id, user_id)
    return {"status": "deleted"}


# ── LeetCode tracker ──────────────────────────────────────────────────────────

@app.get("/api/leetcode")
def get_leetcode_tracker():
    """One row per day of the tracker window, with that day's entry if any."""
    db = get_client()
    entries = get_document(db, get_user_id())["leetcode_tasks"]
    today = date.today()

    by_day: dict[date, dict] = {}
    for entry in entries:
        by_day.setdefault(parse_day_key(entry["date"]), entry)

    days = [
        {
            "date": format_day_key(d),
            "entry": by_day.get(d),
            "is_today": d == today,
            "is_future": d > today,
        }
        for d in tracker_window(today)
    ]
    return {
        "streak": compute_streak(entries, today),
        "total_questions": total_questions(entries),
        "days": days,
    }


@app.post("/api/leetcode/{day}/toggle")
@limiter.limit("60/minute")
def toggle_leetcode(request: Request, day: str, _: str = Depends(require_admin)):
    db = get_client()
    user_id = get_user_id()
    entries = get_document(db, user_id)["leetcode_tasks"]
    result = toggle_leetcode_day(entries, parse_day_key(day), date.today(), new_record_id())
    if result.outcome == FUTURE:
        logger.info("Rejected LeetCode toggle for future day %s", day)
        raise HTTPException(status_code=409, detail=result.warnings[0])

    save_leetcode_tasks(db, user_id, result.records)
    logger.info("LeetCode %s %s for %s: completed=%s", day, result.outcome, user_id, result.record["completed"])
    return {"status": result.outcome, "entry": result.record}


@app.put("/api/leetcode/{day}/count")
@limiter.limit("60/minute")
def update_leetcode_count(
    request: Request, day: str, body: QuestionCountPatch, _: str = Depends(require_admin)
):
    db = get_client()
    user_id = get_user_id()
    entries = get_document(db, user_id)["leetcode_tasks"]
    target = parse_day_key(day)
    result = set_question_count(entries, target, body.count, date.today(), new_record_id())
    if result.outcome == FUTURE:
        raise HTTPException(status_code=409, detail=result.warnings[0])

    if result.records != entries:
        save_leetcode_tasks(db, user_id, result.records)
        logger.info("LeetCode count for %s set to %d for %s", day, body.count, user_id)
    return {"status": result.outcome, "entry": find_entry_for_day(result.records, target)}


# ── Profile image ─────────────────────────────────────────────────────────────

@app.get("/api/profile-image")
def get_profile_image():
    db = get_client()
    return {"image": get_document(db, get_user_id())["profile_image"]}


@app.put("/api/profile-image")
@limiter.limit("10/minute")
def update_profile_image(request: Request, body: ProfileImagePatch, _: str = Depends(require_admin)):
    db = get_client()
    save_profile_image(db, get_user_id(), body.image)
    logger.info("Profile image %s", "updated" if body.image else "cleared")
    return {"status": "updated"}


# ── Export / import ───────────────────────────────────────────────────────────

@app.get("/api/export")
def export_document():
    db = get_client()
    doc = get_document(db, get_user_id())
    return {**doc, "export_date": datetime.now(timezone.utc).isoformat()}


@app.post("/api/import")
@limiter.limit("10/minute")
def import_document(request: Request, body: PlannerExport, _: str = Depends(require_admin)):
    db = get_client()
    document = body.model_dump(include={"tasks", "leetcode_tasks", "profile_image"})
    save_document(db, get_user_id(), document)
    return {
        "status": "imported",
        "tasks": len(document["tasks"]),
        "leetcode_tasks": len(document["leetcode_tasks"]),
    }
