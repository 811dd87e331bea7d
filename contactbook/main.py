# contactbook/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette import status
from starlette.middleware.sessions import SessionMiddleware

# local imports
from contactbook.auth import NotAuthenticated, get_current_user_id, register_auth_routes
from contactbook.config import Settings, settings as default_settings
from contactbook.database import engine, init_db
from contactbook.errors import NotFound
from contactbook.routes_contacts import router as contacts_router

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level.upper(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine)
    logger.info("Database ready")
    yield


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    # --- Sessions (carry the signed-in user id) -------------------------------
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        same_site="lax",
    )

    # --- Templates ------------------------------------------------------------
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.globals["app_name"] = settings.APP_NAME
    app.state.templates = templates

    # --- Error pages ----------------------------------------------------------
    @app.exception_handler(NotAuthenticated)
    async def _login_redirect(request: Request, exc: NotAuthenticated):
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound):
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"title": "Not found", "username": request.session.get("username")},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    # --- Routes ---------------------------------------------------------------
    register_auth_routes(app)
    app.include_router(contacts_router, tags=["contacts"])

    @app.get("/")
    def root(request: Request):
        if get_current_user_id(request):
            return RedirectResponse("/contacts", status_code=status.HTTP_303_SEE_OTHER)
        return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


# Uvicorn entrypoint expects "app"
app = create_app()
