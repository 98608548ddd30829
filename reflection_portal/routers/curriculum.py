"""Curriculum reflection routes — scale, activity ratings, payoff matrix, list."""

import logging

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from reflection_portal.config import CHART_POLL_SECONDS, WEB_TEMPLATES_DIR
from reflection_portal.errors import InvalidScaleConfig, RecordValidationError
from reflection_portal.matrix.chart import DOWNLOAD_FILENAME, build_chart, render_svg
from reflection_portal.matrix.quadrants import QUADRANTS
from reflection_portal.matrix.scale import ScaleConfig, format_tick
from reflection_portal.owner import OwnerContext, current_owner
from reflection_portal.services import curriculum

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/curriculum")
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))
templates.env.filters["num"] = format_tick


def score_label(value) -> str:
    """Form value as the select shows it; non-numeric input is echoed back."""
    try:
        return format_tick(value)
    except (TypeError, ValueError):
        return str(value)


templates.env.filters["score"] = score_label

SESSION_SCALE_KEY = "scale"


def current_scale(request: Request) -> ScaleConfig:
    """The scale stored in the session, or the default one."""
    saved = request.session.get(SESSION_SCALE_KEY)
    if not saved:
        return ScaleConfig()
    try:
        return ScaleConfig.from_form(saved.get("min"), saved.get("max"), saved.get("interval"))
    except InvalidScaleConfig:
        logger.warning("Discarding invalid scale in session: %s", saved)
        request.session.pop(SESSION_SCALE_KEY, None)
        return ScaleConfig()


def _render_page(
    request: Request,
    owner: OwnerContext,
    *,
    form: dict | None = None,
    editing_id: str | None = None,
    error: str = "",
    scale_error: str = "",
    scale_input: dict | None = None,
    status_code: int = 200,
):
    scale = current_scale(request)
    items = curriculum.get_items(owner)
    return templates.TemplateResponse(request, "curriculum/index.html", {
        "active_page": "curriculum",
        "owner": owner,
        "scale": scale,
        "scale_input": scale_input or scale.as_dict(),
        "scale_error": scale_error,
        "ticks": scale.ticks(),
        "form": form or curriculum.empty_form(),
        "editing_id": editing_id,
        "error": error,
        "items": curriculum.with_quadrants(items, scale),
        "summary": curriculum.quadrant_summary(items, scale),
        "quadrants": QUADRANTS,
        "chart": build_chart(curriculum.to_points(items), scale),
        "poll_seconds": CHART_POLL_SECONDS,
    }, status_code=status_code)


@router.get("/")
async def curriculum_index(
    request: Request,
    edit: str = Query(""),
    owner: OwnerContext = Depends(current_owner),
):
    form = None
    editing_id = None
    if edit:
        item = curriculum.get_item(owner, edit)
        if item:
            form = {field: item.get(field, "") for field in curriculum.FIELDS}
            editing_id = edit
    return _render_page(request, owner, form=form, editing_id=editing_id)


@router.post("/scale")
async def curriculum_scale(
    request: Request,
    min_value: str = Form(..., alias="min"),
    max_value: str = Form(..., alias="max"),
    interval: str = Form(...),
    owner: OwnerContext = Depends(current_owner),
):
    """Apply a new axis scale for this session."""
    try:
        scale = ScaleConfig.from_form(min_value, max_value, interval)
    except InvalidScaleConfig as e:
        return _render_page(
            request, owner,
            scale_error=str(e),
            scale_input={"min": min_value, "max": max_value, "interval": interval},
            status_code=400,
        )
    request.session[SESSION_SCALE_KEY] = scale.as_dict()
    return RedirectResponse("/curriculum/", status_code=303)


@router.post("/items")
async def curriculum_create(
    request: Request,
    activity: str = Form(""),
    importance: str = Form("0"),
    satisfaction: str = Form("0"),
    proposer: str = Form(""),
    grade: str = Form(""),
    memo: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    form = {"activity": activity, "importance": importance, "satisfaction": satisfaction,
            "proposer": proposer, "grade": grade, "memo": memo}
    try:
        curriculum.create_item(owner, form)
    except RecordValidationError as e:
        return _render_page(request, owner, form=form, error=str(e), status_code=400)
    except Exception:
        logger.exception("Failed to save curriculum item for owner %s", owner.owner_id)
        return _render_page(request, owner, form=form,
                            error="Saving failed. Please try again.", status_code=502)
    return RedirectResponse("/curriculum/", status_code=303)


@router.post("/items/{item_id}")
async def curriculum_update(
    request: Request,
    item_id: str,
    activity: str = Form(""),
    importance: str = Form("0"),
    satisfaction: str = Form("0"),
    proposer: str = Form(""),
    grade: str = Form(""),
    memo: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    form = {"activity": activity, "importance": importance, "satisfaction": satisfaction,
            "proposer": proposer, "grade": grade, "memo": memo}
    try:
        curriculum.update_item(owner, item_id, form)
    except RecordValidationError as e:
        return _render_page(request, owner, form=form, editing_id=item_id,
                            error=str(e), status_code=400)
    except Exception:
        logger.exception("Failed to update curriculum item %s", item_id)
        return _render_page(request, owner, form=form, editing_id=item_id,
                            error="Saving failed. Please try again.", status_code=502)
    return RedirectResponse("/curriculum/", status_code=303)


@router.post("/items/{item_id}/delete")
async def curriculum_delete(
    item_id: str,
    confirmed: str = Form(""),
    owner: OwnerContext = Depends(current_owner),
):
    """Delete an activity. The UI asks for confirmation first (hx-confirm)."""
    if confirmed != "yes":
        return HTMLResponse(
            '<div class="rp-alert rp-alert--error">Deletion must be confirmed.</div>',
            status_code=400,
        )
    try:
        curriculum.delete_item(owner, item_id)
    except Exception:
        logger.exception("Failed to delete curriculum item %s", item_id)
        return HTMLResponse(
            '<tr><td colspan="10"><div class="rp-alert rp-alert--error">'
            'Deleting failed. Please try again.</div></td></tr>'
        )
    # Empty body: HTMX swaps the table row away
    return HTMLResponse("")


@router.get("/chart")
async def curriculum_chart(
    request: Request,
    owner: OwnerContext = Depends(current_owner),
):
    """Chart partial, polled by the page to pick up changes from the store."""
    scale = current_scale(request)
    items = curriculum.get_items(owner)
    return templates.TemplateResponse(request, "curriculum/_chart.svg", {
        "chart": build_chart(curriculum.to_points(items), scale),
    })


@router.get("/chart.svg")
async def curriculum_chart_download(
    request: Request,
    owner: OwnerContext = Depends(current_owner),
):
    """The payoff matrix as a standalone SVG file."""
    scale = current_scale(request)
    items = curriculum.get_items(owner)
    svg = render_svg(curriculum.to_points(items), scale)
    return Response(
        content=svg,
        media_type="image/svg+xml",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
