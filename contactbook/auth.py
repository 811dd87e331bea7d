# contactbook/auth.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.orm import Session
from starlette import status

from contactbook.database import get_db
from contactbook.models import User
from contactbook.utils import hash_password, verify_password

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8


class NotAuthenticated(Exception):
    """Raised by current_user_id when the session has no user."""


def get_current_user_id(request: Request) -> Optional[str]:
    """Return the signed-in user's id from the session, or None."""
    return request.session.get("uid")


def current_user_id(request: Request) -> str:
    """
    FastAPI dependency resolving the caller's identity.

    Anonymous requests raise NotAuthenticated, which the app turns into a
    redirect to /login.
    """
    uid = get_current_user_id(request)
    if not uid:
        raise NotAuthenticated()
    return uid


def login_user(request: Request, user: User) -> None:
    request.session.clear()
    request.session["uid"] = user.id
    request.session["username"] = user.username


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, username: str, password: str) -> User:
    user = User(username=username, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    logger.info("Registered user %s", user.id)
    return user


def _registration_error(db: Session, username: str, password: str) -> Optional[str]:
    if not username:
        return "Username is required."
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username cannot exceed {USERNAME_MAX_LENGTH} characters."
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters."
    taken = db.execute(select(User.id).where(User.username == username)).first()
    if taken:
        return "That username is already taken."
    return None


# --- Public API used by main.py ----------------------------------------------
def register_auth_routes(app: FastAPI) -> None:
    """Mount /login, /register and /logout."""

    templates = app.state.templates  # Jinja2Templates set in main.py

    @app.get("/login")
    def login_form(request: Request):
        if get_current_user_id(request):
            return RedirectResponse(url="/contacts", status_code=status.HTTP_303_SEE_OTHER)
        return templates.TemplateResponse(request, "login.html", {"title": "Login"})

    @app.post("/login")
    def login_submit(
        request: Request,
        username: str = Form(""),
        password: str = Form(""),
        db: Session = Depends(get_db),
    ):
        user = authenticate(db, username.strip(), password)
        if user is None:
            logger.warning("Failed login for username %r", username)
            return templates.TemplateResponse(
                request,
                "login.html",
                {"title": "Login", "error": "Invalid username or password.", "form_username": username},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        login_user(request, user)
        return RedirectResponse(url="/contacts", status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/register")
    def register_form(request: Request):
        return templates.TemplateResponse(request, "register.html", {"title": "Register"})

    @app.post("/register")
    def register_submit(
        request: Request,
        username: str = Form(""),
        password: str = Form(""),
        db: Session = Depends(get_db),
    ):
        username = username.strip()
        error = _registration_error(db, username, password)
        if error:
            return templates.TemplateResponse(
                request,
                "register.html",
                {"title": "Register", "error": error, "form_username": username},
                status_code=422,
            )
        user = create_user(db, username, password)
        login_user(request, user)
        return RedirectResponse(url="/contacts", status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/logout")
    def logout(request: Request):
        request.session.clear()
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
