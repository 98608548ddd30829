"""Sign-in routes — phone suffix + password, logout."""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from reflection_portal.config import SCHOOL_NAME, WEB_TEMPLATES_DIR
from reflection_portal.owner import (
    normalize_phone_suffix, owner_from_session, sign_in, sign_out, validate_sign_in,
)

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@router.get("/")
async def home(request: Request):
    if owner_from_session(request):
        return RedirectResponse("/survey", status_code=303)
    return RedirectResponse("/login", status_code=303)


@router.get("/login")
async def login_form(request: Request):
    if owner_from_session(request):
        return RedirectResponse("/survey", status_code=303)
    return templates.TemplateResponse(request, "login.html", {
        "school_name": SCHOOL_NAME,
        "phone_suffix": "",
        "error": "",
    })


@router.post("/login")
async def login_submit(
    request: Request,
    phone_suffix: str = Form(""),
    password: str = Form(""),
):
    phone_suffix = normalize_phone_suffix(phone_suffix)
    error = validate_sign_in(phone_suffix, password)
    if error:
        return templates.TemplateResponse(request, "login.html", {
            "school_name": SCHOOL_NAME,
            "phone_suffix": phone_suffix,
            "error": error,
        }, status_code=400)

    owner = sign_in(request, phone_suffix)
    logger.info("Owner %s signed in", owner.owner_id)
    return RedirectResponse("/survey", status_code=303)


@router.post("/logout")
async def logout(request: Request):
    sign_out(request)
    return RedirectResponse("/login", status_code=303)
