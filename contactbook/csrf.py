# contactbook/csrf.py
"""
Anti-forgery tokens for form submits.

A token is the caller's user id signed with SECRET_KEY and a timestamp.
It only verifies for the same user that it was issued to, so a token
lifted from one account is useless against another.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Form, HTTPException, status
from itsdangerous import BadSignature, SignatureExpired

from contactbook.auth import current_user_id
from contactbook.config import settings
from contactbook.utils import get_serializer

CSRF_SALT = "contact-form"


def issue_token(user_id: str) -> str:
    return get_serializer(CSRF_SALT).dumps(user_id)


def verify_token(token: Optional[str], user_id: str, max_age: Optional[int] = None) -> bool:
    if not token:
        return False
    if max_age is None:
        max_age = settings.CSRF_TOKEN_MAX_AGE
    try:
        owner = get_serializer(CSRF_SALT).loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return False
    return owner == user_id


def require_csrf(
    csrf_token: str = Form(""),
    user_id: str = Depends(current_user_id),
) -> None:
    if not verify_token(csrf_token, user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or missing form token")
