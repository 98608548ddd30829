"""Staff survey route — GET /survey"""

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates

from reflection_portal.config import SCHOOL_NAME, SURVEY_URL, WEB_TEMPLATES_DIR
from reflection_portal.owner import OwnerContext, current_owner

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@router.get("/survey")
async def survey(request: Request, owner: OwnerContext = Depends(current_owner)):
    return templates.TemplateResponse(request, "survey.html", {
        "active_page": "survey",
        "owner": owner,
        "school_name": SCHOOL_NAME,
        "survey_url": SURVEY_URL,
    })
