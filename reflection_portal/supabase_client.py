"""Supabase connection, query helpers and the owner-scoped record store.

Every portal collection carries an ``owner_id`` column. The record store
functions take an explicit OwnerContext and always filter on it; nothing
here reads the current user from ambient state.
"""

import asyncio
import logging
import threading
from datetime import datetime, timezone

from supabase import Client, create_client

from reflection_portal.config import SUPABASE_SERVICE_KEY, SUPABASE_URL
from reflection_portal.owner import OwnerContext

logger = logging.getLogger(__name__)

CURRICULUM_ITEMS = "curriculum_items"
WORK_ITEMS = "work_items"
WORK_IMPROVEMENTS = "work_improvements"
SUGGESTION_ITEMS = "suggestion_items"

COLLECTIONS = (CURRICULUM_ITEMS, WORK_ITEMS, WORK_IMPROVEMENTS, SUGGESTION_ITEMS)

_client: Client | None = None
_client_lock = threading.Lock()


def get_client() -> Client:
    """Return the Supabase client singleton (thread-safe)."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
                    raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
                _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _client


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _table(name: str):
    """Return a table query builder."""
    return get_client().table(name)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def insert(table: str, data: dict) -> dict:
    """Insert a row and return it."""
    result = _table(table).insert(data).execute()
    return result.data[0] if result.data else {}


def update(table: str, data: dict, match: dict) -> dict:
    """Update rows matching conditions."""
    q = _table(table).update(data)
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data[0] if result.data else {}


def delete(table: str, match: dict) -> list:
    """Delete rows matching conditions."""
    q = _table(table).delete()
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data


def select(table: str, columns: str = "*", match: dict | None = None,
           limit: int | None = None) -> list[dict]:
    """Select rows with optional filtering."""
    q = _table(table).select(columns)
    if match:
        for k, v in match.items():
            q = q.eq(k, v)
    if limit:
        q = q.limit(limit)
    result = q.execute()
    return result.data or []


# ---------------------------------------------------------------------------
# Owner-scoped record store
# ---------------------------------------------------------------------------

def newest_first(rows: list[dict]) -> list[dict]:
    """Sort by created_at descending; rows without a timestamp go last."""
    stamped = [r for r in rows if r.get("created_at")]
    unstamped = [r for r in rows if not r.get("created_at")]
    stamped.sort(key=lambda r: str(r["created_at"]), reverse=True)
    return stamped + unstamped


def create_record(collection: str, owner: OwnerContext, record: dict) -> dict:
    """Insert a record stamped with the owner and creation time."""
    data = dict(record)
    data.pop("id", None)
    data["owner_id"] = owner.owner_id
    data["created_at"] = _now()
    row = insert(collection, data)
    logger.info("Created %s record %s for owner %s", collection, row.get("id"), owner.owner_id)
    return row


def update_record(collection: str, owner: OwnerContext, record_id: str, partial: dict) -> dict:
    """Update one of the owner's records. Returns {} if nothing matched."""
    data = {k: v for k, v in partial.items() if k not in ("id", "owner_id", "created_at")}
    data["updated_at"] = _now()
    return update(collection, data, {"id": record_id, "owner_id": owner.owner_id})


def delete_record(collection: str, owner: OwnerContext, record_id: str) -> bool:
    """Delete one of the owner's records. Returns True if a row was removed."""
    removed = delete(collection, {"id": record_id, "owner_id": owner.owner_id})
    if removed:
        logger.info("Deleted %s record %s for owner %s", collection, record_id, owner.owner_id)
    return bool(removed)


def get_record(collection: str, owner: OwnerContext, record_id: str) -> dict | None:
    """Get one of the owner's records by id."""
    rows = select(collection, match={"id": record_id, "owner_id": owner.owner_id}, limit=1)
    return rows[0] if rows else None


def list_records(collection: str, owner: OwnerContext) -> list[dict]:
    """All of the owner's records in a collection, newest first.

    The store gives no ordering guarantee, so sorting happens here.
    """
    return newest_first(select(collection, match={"owner_id": owner.owner_id}))


async def subscribe(collection: str, owner: OwnerContext, interval: float = 2.0):
    """Yield the owner's records whenever they change.

    Polls the owner-filtered select every ``interval`` seconds and yields a
    full, sorted snapshot on the first poll and after every change.
    """
    previous = None
    while True:
        rows = await asyncio.to_thread(list_records, collection, owner)
        if rows != previous:
            previous = rows
            yield rows
        await asyncio.sleep(interval)
