"""School suggestions service — suggestion cards with per-field autosave."""

from reflection_portal import supabase_client as db
from reflection_portal.errors import RecordValidationError
from reflection_portal.owner import OwnerContext

DEFAULT_CATEGORY = "general"
CATEGORIES = ["general", "curriculum", "student life", "administration", "facilities"]

# Editable card fields, in display order
FIELDS = ["category", "title", "goal", "lesson_learned", "status", "why", "plan"]

FIELD_LABELS = {
    "category": "Category",
    "title": "Suggestion",
    "goal": "What we aimed for",
    "lesson_learned": "What we learned",
    "status": "Where things stand",
    "why": "Why it matters",
    "plan": "Proposed plan",
}


def clean_suggestion(data: dict) -> dict:
    """Fill missing fields with empty strings; title is required."""
    cleaned = {field: (data.get(field) or "").strip() for field in FIELDS}
    if not cleaned["title"]:
        raise RecordValidationError("Enter a title for the suggestion.")
    cleaned["category"] = cleaned["category"] or DEFAULT_CATEGORY
    return cleaned


def create_suggestion(owner: OwnerContext, data: dict) -> dict:
    return db.create_record(db.SUGGESTION_ITEMS, owner, clean_suggestion(data))


def save_field(owner: OwnerContext, item_id: str, field: str, value: str) -> dict:
    """Autosave a single edited field of an existing suggestion."""
    if field not in FIELDS:
        raise RecordValidationError(f"Unknown suggestion field: {field}")
    value = (value or "").strip()
    if field == "title" and not value:
        raise RecordValidationError("A suggestion needs a title.")
    if field == "category":
        value = value or DEFAULT_CATEGORY
    return db.update_record(db.SUGGESTION_ITEMS, owner, item_id, {field: value})


def delete_suggestion(owner: OwnerContext, item_id: str) -> bool:
    return db.delete_record(db.SUGGESTION_ITEMS, owner, item_id)


def get_suggestions(owner: OwnerContext) -> list[dict]:
    return db.list_records(db.SUGGESTION_ITEMS, owner)
