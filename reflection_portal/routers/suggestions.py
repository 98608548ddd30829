"""School suggestion routes — new cards, per-field autosave, delete."""

import html
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from reflection_portal.config import WEB_TEMPLATES_DIR
from reflection_portal.errors import RecordValidationError
from reflection_portal.owner import OwnerContext, current_owner
from reflection_portal.services import suggestions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suggestions")
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


def _render_page(request: Request, owner: OwnerContext, *, draft: dict | None = None,
                 error: str = "", status_code: int = 200):
    return templates.TemplateResponse(request, "suggestions/index.html", {
        "active_page": "suggestions",
        "owner": owner,
        "items": suggestions.get_suggestions(owner),
        "draft": draft,
        "error": error,
        "fields": suggestions.FIELDS,
        "labels": suggestions.FIELD_LABELS,
        "categories": suggestions.CATEGORIES,
    }, status_code=status_code)


@router.get("/")
async def suggestions_index(request: Request, owner: OwnerContext = Depends(current_owner)):
    return _render_page(request, owner)


@router.post("/")
async def suggestion_create(
    request: Request,
    category: str = Form(suggestions.DEFAULT_CATEGORY),
    title: str = Form(""),
    goal: str = Form(""),
    lesson_learned: str = Form(""),
    status: str = Form(""),
    why: str = Form(""),
    plan: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    """Save a new suggestion card."""
    draft = {"category": category, "title": title, "goal": goal, "lesson_learned": lesson_learned,
             "status": status, "why": why, "plan": plan}
    try:
        suggestions.create_suggestion(owner, draft)
    except RecordValidationError as e:
        return _render_page(request, owner, draft=draft, error=str(e), status_code=400)
    except Exception:
        logger.exception("Failed to save suggestion for owner %s", owner.owner_id)
        return _render_page(request, owner, draft=draft,
                            error="Saving failed. Please try again.", status_code=502)
    return RedirectResponse("/suggestions/", status_code=303)


@router.post("/{item_id}/field")
async def suggestion_field(
    item_id: str,
    field: str = Form(...),
    value: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    """Autosave one field of a saved card (fires on change)."""
    try:
        suggestions.save_field(owner, item_id, field, value)
    except RecordValidationError as e:
        return HTMLResponse(f'<span class="rp-save-state rp-save-state--error">{html.escape(str(e))}</span>')
    except Exception:
        logger.exception("Failed to autosave %s on suggestion %s", field, item_id)
        return HTMLResponse('<span class="rp-save-state rp-save-state--error">Not saved. Try again.</span>')
    return HTMLResponse('<span class="rp-save-state">Saved</span>')


@router.post("/{item_id}/delete")
async def suggestion_delete(
    item_id: str,
    confirmed: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    if confirmed != "yes":
        return HTMLResponse(
            '<div class="rp-alert rp-alert--error">Deletion must be confirmed.</div>',
            status_code=400,
        )
    try:
        suggestions.delete_suggestion(owner, item_id)
    except Exception:
        logger.exception("Failed to delete suggestion %s", item_id)
        return HTMLResponse('<div class="rp-alert rp-alert--error">Deleting failed. Please try again.</div>')
    return HTMLResponse("")
