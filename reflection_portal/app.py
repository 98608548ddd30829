"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from reflection_portal.config import (
    ANTHROPIC_API_KEY, DEFAULT_SESSION_SECRET, SESSION_SECRET, STATIC_DIR, SUPABASE_SERVICE_KEY,
    SUPABASE_URL,
)
from reflection_portal.owner import SignInRequired
from reflection_portal.routers import auth, curriculum, suggestions, survey, work

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup checks."""
    if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_KEY not set — record storage will fail")
    if not ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not set — document extraction will return no activities")
    if SESSION_SECRET == DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET not set — using the built-in development secret, session cookies can be forged")
    yield


async def _sign_in_required(request: Request, exc: SignInRequired) -> Response:
    """Send signed-out visitors to /login (HTMX requests get HX-Redirect)."""
    if request.headers.get("HX-Request"):
        return Response(status_code=204, headers={"HX-Redirect": "/login"})
    return RedirectResponse("/login", status_code=303)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Staff Reflection Portal",
        description=(
            "Curriculum payoff matrix, work-history reflection and school "
            "improvement suggestions for school staff."
        ),
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET, same_site="lax")
    app.add_exception_handler(SignInRequired, _sign_in_required)

    # Static files
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    for r in [auth, survey, curriculum, work, suggestions]:
        app.include_router(r.router)

    return app
