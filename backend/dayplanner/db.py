import os
import logging
from functools import lru_cache
from supabase import create_client, Client

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE = "planner_documents"

EMPTY_DOCUMENT = {"tasks": [], "leetcode_tasks": [], "profile_image": ""}


@lru_cache(maxsize=1)
def get_client() -> Client:
    url = os.environ["SUPABASE_URL"]
    key = os.environ["SUPABASE_SERVICE_KEY"]
    return create_client(url, key)


def get_document(db: Client, user_id: str) -> dict:
    """The user's planner document; a missing row reads as an empty one."""
    res = db.table(DOCUMENTS_TABLE).select("*").eq("user_id", user_id).execute()
    row = res.data[0] if res.data else {}
    return {
        "tasks": row.get("tasks") or [],
        "leetcode_tasks": row.get("leetcode_tasks") or [],
        "profile_image": row.get("profile_image") or "",
    }


def _upsert(db: Client, user_id: str, updates: dict) -> None:
    db.table(DOCUMENTS_TABLE).upsert({"user_id": user_id, **updates}).execute()


def save_tasks(db: Client, user_id: str, tasks: list[dict]) -> None:
    _upsert(db, user_id, {"tasks": tasks})


def save_leetcode_tasks(db: Client, user_id: str, entries: list[dict]) -> None:
    _upsert(db, user_id, {"leetcode_tasks": entries})


def save_profile_image(db: Client, user_id: str, image: str) -> None:
    _upsert(db, user_id, {"profile_image": image or ""})


def save_document(db: Client, user_id: str, document: dict) -> None:
    """Replace the whole document, e.g. after an import."""
    _upsert(db, user_id, {**EMPTY_DOCUMENT, **document})
    logger.info("Document replaced for %s: %d tasks, %d leetcode entries",
                user_id, len(document.get("tasks") or []), len(document.get("leetcode_tasks") or []))
