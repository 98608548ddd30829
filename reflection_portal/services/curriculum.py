"""Curriculum reflection service — payoff items CRUD + matrix inputs."""

import logging
import math

from reflection_portal import supabase_client as db
from reflection_portal.errors import RecordValidationError
from reflection_portal.matrix.layout import ActivityPoint
from reflection_portal.matrix.quadrants import classify
from reflection_portal.matrix.scale import ScaleConfig
from reflection_portal.owner import OwnerContext

logger = logging.getLogger(__name__)

FIELDS = ("activity", "importance", "satisfaction", "proposer", "grade", "memo")


def empty_form() -> dict:
    return {"activity": "", "importance": 0, "satisfaction": 0, "proposer": "", "grade": "", "memo": ""}


def clean_item(data: dict) -> dict:
    """Validate and normalize a submitted payoff item."""
    activity = (data.get("activity") or "").strip()
    if not activity:
        raise RecordValidationError("Enter the name of the activity.")
    try:
        importance = float(data.get("importance") or 0)
        satisfaction = float(data.get("satisfaction") or 0)
    except (TypeError, ValueError) as e:
        raise RecordValidationError("Importance and satisfaction must be numbers.") from e
    if not (math.isfinite(importance) and math.isfinite(satisfaction)):
        raise RecordValidationError("Importance and satisfaction must be finite numbers.")
    return {
        "activity": activity,
        "importance": importance,
        "satisfaction": satisfaction,
        "proposer": (data.get("proposer") or "").strip(),
        "grade": (data.get("grade") or "").strip(),
        "memo": (data.get("memo") or "").strip(),
    }


def create_item(owner: OwnerContext, data: dict) -> dict:
    return db.create_record(db.CURRICULUM_ITEMS, owner, clean_item(data))


def update_item(owner: OwnerContext, item_id: str, data: dict) -> dict:
    return db.update_record(db.CURRICULUM_ITEMS, owner, item_id, clean_item(data))


def delete_item(owner: OwnerContext, item_id: str) -> bool:
    return db.delete_record(db.CURRICULUM_ITEMS, owner, item_id)


def get_item(owner: OwnerContext, item_id: str) -> dict | None:
    return db.get_record(db.CURRICULUM_ITEMS, owner, item_id)


def get_items(owner: OwnerContext) -> list[dict]:
    """Owner's payoff items, newest first."""
    return db.list_records(db.CURRICULUM_ITEMS, owner)


def to_points(items: list[dict]) -> list[ActivityPoint]:
    return [ActivityPoint.from_record(item) for item in items]


def with_quadrants(items: list[dict], scale: ScaleConfig) -> list[dict]:
    """Attach the quadrant definition to each item for the list table."""
    mid = scale.midpoint
    rows = []
    for item in items:
        point = ActivityPoint.from_record(item)
        rows.append({**item, "quadrant": classify(point.importance, point.satisfaction, mid)})
    return rows


def quadrant_summary(items: list[dict], scale: ScaleConfig) -> dict:
    """Count of items per quadrant code."""
    summary = {"Q1": 0, "Q2": 0, "Q3": 0, "Q4": 0}
    for row in with_quadrants(items, scale):
        summary[row["quadrant"]["code"]] += 1
    return summary
