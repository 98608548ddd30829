"""Work reflection service — work items, document import, improvement proposals."""

import logging
import re

from reflection_portal import supabase_client as db
from reflection_portal.errors import RecordValidationError, UnsupportedDocument
from reflection_portal.owner import OwnerContext
from reflection_portal.services import spreadsheet
from reflection_portal.services.extraction import extract_activities, is_supported_media_type

logger = logging.getLogger(__name__)

# Academic year runs March -> February
ACADEMIC_MONTHS = [
    "March", "April", "May", "June", "July", "August",
    "September", "October", "November", "December", "January", "February",
]
_MONTH_NUMBERS = {name.lower(): (i + 2) % 12 + 1 for i, name in enumerate(ACADEMIC_MONTHS)}
_MONTH_NUMBERS.update({name[:3].lower(): n for name, n in list(_MONTH_NUMBERS.items())})
_UNKNOWN_MONTH = 99


# ---------------------------------------------------------------------------
# Month ordering
# ---------------------------------------------------------------------------

def month_number(label: str) -> int | None:
    """Calendar month (1-12) named by a label like 'March', 'Mar.', '3월' or '3'."""
    text = (label or "").strip().lower()
    if not text:
        return None
    match = re.search(r"(?<!\d)\d{1,2}(?!\d)", text)
    if match:
        n = int(match.group())
        return n if 1 <= n <= 12 else None
    for name, n in _MONTH_NUMBERS.items():
        if text.startswith(name):
            return n
    return None


def academic_month_index(label: str) -> int:
    """0 for March ... 11 for February; unrecognised labels sort last."""
    n = month_number(label)
    if n is None:
        return _UNKNOWN_MONTH
    return (n - 3) % 12


def sort_by_month(items: list[dict]) -> list[dict]:
    """Stable sort of work items into academic-year order."""
    return sorted(items, key=lambda item: academic_month_index(item.get("month", "")))


# ---------------------------------------------------------------------------
# Work items
# ---------------------------------------------------------------------------

def _blank_work_item(month: str, title: str, department: str = "") -> dict:
    return {
        "month": month,
        "department": department,
        "title": title,
        "goal": "",
        "lesson_learned": "",
        "status": "",
        "why": "",
        "plan": "",
    }


def clean_work_item(data: dict) -> dict:
    title = (data.get("title") or "").strip()
    if not title:
        raise RecordValidationError("Enter the title of the work item.")
    return {
        "month": (data.get("month") or ACADEMIC_MONTHS[0]).strip(),
        "department": (data.get("department") or "").strip(),
        "title": title,
    }


def create_work_item(owner: OwnerContext, data: dict) -> dict:
    item = clean_work_item(data)
    return db.create_record(db.WORK_ITEMS, owner, _blank_work_item(**item))


def update_work_item(owner: OwnerContext, item_id: str, data: dict) -> dict:
    return db.update_record(db.WORK_ITEMS, owner, item_id, clean_work_item(data))


def delete_work_item(owner: OwnerContext, item_id: str) -> bool:
    return db.delete_record(db.WORK_ITEMS, owner, item_id)


def get_work_item(owner: OwnerContext, item_id: str) -> dict | None:
    return db.get_record(db.WORK_ITEMS, owner, item_id)


def get_work_items(owner: OwnerContext) -> list[dict]:
    """Owner's work items in academic-month order."""
    return sort_by_month(db.list_records(db.WORK_ITEMS, owner))


# ---------------------------------------------------------------------------
# Document import
# ---------------------------------------------------------------------------

def prepare_document(filename: str, data: bytes, media_type: str) -> tuple[bytes, str]:
    """Spreadsheets become CSV text; other documents pass through as-is."""
    if spreadsheet.is_spreadsheet(filename):
        text = spreadsheet.spreadsheet_to_text(filename, data)
        return text.encode("utf-8"), "text/plain"
    media_type = (media_type or "").split(";")[0].strip().lower()
    if not is_supported_media_type(media_type):
        raise UnsupportedDocument(f"Unsupported file type: {media_type or filename}")
    return data, media_type


def import_extracted(owner: OwnerContext, groups: list[dict]) -> int:
    """Create one work item per extracted activity. Returns how many were written.

    Each write is independent: if one fails the others still land.
    """
    created = 0
    for group in groups:
        for activity in group.get("activities", []):
            try:
                db.create_record(db.WORK_ITEMS, owner, _blank_work_item(group["month"], activity))
                created += 1
            except Exception as e:
                logger.error("Failed to save extracted activity %r: %s", activity, e)
    return created


def import_document(owner: OwnerContext, filename: str, data: bytes, media_type: str) -> int:
    """Convert, extract and save an uploaded calendar. Returns the number of items created."""
    payload, payload_type = prepare_document(filename, data, media_type)
    groups = extract_activities(payload, payload_type)
    created = import_extracted(owner, groups)
    logger.info("Imported %d work items from %s for owner %s", created, filename, owner.owner_id)
    return created


# ---------------------------------------------------------------------------
# Improvement proposals
# ---------------------------------------------------------------------------

def clean_improvement(data: dict) -> dict:
    target = (data.get("target_work") or "").strip()
    plan = (data.get("plan") or "").strip()
    if not target or not plan:
        raise RecordValidationError("Enter both the target work and the proposed change.")
    return {"target_work": target, "reason": (data.get("reason") or "").strip(), "plan": plan}


def create_improvement(owner: OwnerContext, data: dict) -> dict:
    return db.create_record(db.WORK_IMPROVEMENTS, owner, clean_improvement(data))


def update_improvement(owner: OwnerContext, item_id: str, data: dict) -> dict:
    return db.update_record(db.WORK_IMPROVEMENTS, owner, item_id, clean_improvement(data))


def delete_improvement(owner: OwnerContext, item_id: str) -> bool:
    return db.delete_record(db.WORK_IMPROVEMENTS, owner, item_id)


def get_improvement(owner: OwnerContext, item_id: str) -> dict | None:
    return db.get_record(db.WORK_IMPROVEMENTS, owner, item_id)


def get_improvements(owner: OwnerContext) -> list[dict]:
    return db.list_records(db.WORK_IMPROVEMENTS, owner)
