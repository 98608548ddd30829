"""Work reflection routes — monthly work items, calendar import, improvement proposals."""

import html
import logging

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from reflection_portal.config import ACADEMIC_YEAR_START, WEB_TEMPLATES_DIR
from reflection_portal.errors import RecordValidationError, UnsupportedDocument
from reflection_portal.owner import OwnerContext, current_owner
from reflection_portal.services import work_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/work")
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))

_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def _render_page(
    request: Request,
    owner: OwnerContext,
    *,
    item_form: dict | None = None,
    editing_item_id: str | None = None,
    item_error: str = "",
    improvement_form: dict | None = None,
    editing_improvement_id: str | None = None,
    improvement_error: str = "",
    status_code: int = 200,
):
    return templates.TemplateResponse(request, "work/index.html", {
        "active_page": "work",
        "owner": owner,
        "year_start": ACADEMIC_YEAR_START,
        "months": work_items.ACADEMIC_MONTHS,
        "items": work_items.get_work_items(owner),
        "improvements": work_items.get_improvements(owner),
        "item_form": item_form or {"month": work_items.ACADEMIC_MONTHS[0], "department": "", "title": ""},
        "editing_item_id": editing_item_id,
        "item_error": item_error,
        "improvement_form": improvement_form or {"target_work": "", "reason": "", "plan": ""},
        "editing_improvement_id": editing_improvement_id,
        "improvement_error": improvement_error,
    }, status_code=status_code)


def _alert(message: str, kind: str = "error", status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        f'<div class="rp-alert rp-alert--{kind}">{html.escape(message)}</div>', status_code=status_code,
    )


@router.get("/")
async def work_index(
    request: Request,
    edit: str = Query(""),
    edit_improvement: str = Query(""),
    owner: OwnerContext = Depends(current_owner),
):
    item_form = None
    editing_item_id = None
    if edit:
        item = work_items.get_work_item(owner, edit)
        if item:
            item_form = {k: item.get(k, "") for k in ("month", "department", "title")}
            editing_item_id = edit

    improvement_form = None
    editing_improvement_id = None
    if edit_improvement:
        imp = work_items.get_improvement(owner, edit_improvement)
        if imp:
            improvement_form = {k: imp.get(k, "") for k in ("target_work", "reason", "plan")}
            editing_improvement_id = edit_improvement

    return _render_page(
        request, owner,
        item_form=item_form, editing_item_id=editing_item_id,
        improvement_form=improvement_form, editing_improvement_id=editing_improvement_id,
    )


# ---------------------------------------------------------------------------
# Work items
# ---------------------------------------------------------------------------

@router.post("/items")
async def work_item_save(
    request: Request,
    item_id: str = Form(""),
    month: str = Form(""),
    department: str = Form(""),
    title: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    """Create a work item, or update it when item_id is set."""
    form = {"month": month, "department": department, "title": title}
    try:
        if item_id:
            work_items.update_work_item(owner, item_id, form)
        else:
            work_items.create_work_item(owner, form)
    except RecordValidationError as e:
        return _render_page(request, owner, item_form=form, editing_item_id=item_id or None,
                            item_error=str(e), status_code=400)
    except Exception:
        logger.exception("Failed to save work item for owner %s", owner.owner_id)
        return _render_page(request, owner, item_form=form, editing_item_id=item_id or None,
                            item_error="Saving failed. Please try again.", status_code=502)
    return RedirectResponse("/work/", status_code=303)


@router.post("/items/{item_id}/delete")
async def work_item_delete(
    item_id: str,
    confirmed: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    if confirmed != "yes":
        return _alert("Deletion must be confirmed.", status_code=400)
    try:
        work_items.delete_work_item(owner, item_id)
    except Exception:
        logger.exception("Failed to delete work item %s", item_id)
        return _alert("Deleting failed. Please try again.")
    return HTMLResponse("")


@router.post("/upload")
async def work_upload(
    file: UploadFile = File(...),
    owner: OwnerContext = Depends(current_owner),
):
    """Extract key monthly activities from an uploaded calendar or plan."""
    data = await file.read()
    if not data:
        return _alert("The uploaded file is empty.")
    if len(data) > _MAX_UPLOAD_BYTES:
        return _alert("The file is too large (20 MB max).")

    try:
        # Blocking: one Claude call plus one insert per activity
        created = await run_in_threadpool(
            work_items.import_document, owner, file.filename or "", data, file.content_type or "",
        )
    except UnsupportedDocument as e:
        return _alert(str(e))
    except Exception:
        logger.exception("Processing upload %s failed", file.filename)
        return _alert("Processing the file failed. Please try again.")

    if created == 0:
        return _alert("No key activities could be extracted from this file.", kind="warning")
    return HTMLResponse(
        f'<div class="rp-alert rp-alert--success">'
        f'Analysis complete: {created} key work items added. <a href="/work/">Refresh</a>'
        f'</div>'
    )


# ---------------------------------------------------------------------------
# Improvement proposals
# ---------------------------------------------------------------------------

@router.post("/improvements")
async def improvement_save(
    request: Request,
    improvement_id: str = Form(""),
    target_work: str = Form(""),
    reason: str = Form(""),
    plan: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    form = {"target_work": target_work, "reason": reason, "plan": plan}
    try:
        if improvement_id:
            work_items.update_improvement(owner, improvement_id, form)
        else:
            work_items.create_improvement(owner, form)
    except RecordValidationError as e:
        return _render_page(request, owner, improvement_form=form,
                            editing_improvement_id=improvement_id or None,
                            improvement_error=str(e), status_code=400)
    except Exception:
        logger.exception("Failed to save improvement for owner %s", owner.owner_id)
        return _render_page(request, owner, improvement_form=form,
                            editing_improvement_id=improvement_id or None,
                            improvement_error="Saving failed. Please try again.", status_code=502)
    return RedirectResponse("/work/", status_code=303)


@router.post("/improvements/{improvement_id}/delete")
async def improvement_delete(
    improvement_id: str,
    confirmed: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    if confirmed != "yes":
        return _alert("Deletion must be confirmed.", status_code=400)
    try:
        work_items.delete_improvement(owner, improvement_id)
    except Exception:
        logger.exception("Failed to delete improvement %s", improvement_id)
        return _alert("Deleting failed. Please try again.")
    return HTMLResponse("")
