# contactbook/utils.py
from __future__ import annotations

from itsdangerous import URLSafeTimedSerializer
from passlib.context import CryptContext

from contactbook.config import settings

# -------------------------------------------------------------------
# Password hashing / verification
# -------------------------------------------------------------------
_pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return _pwd_ctx.hash(password)

def verify_password(password: str, hashed: str) -> bool:
    try:
        return _pwd_ctx.verify(password, hashed)
    except ValueError:
        # malformed or unknown hash
        return False

# -------------------------------------------------------------------
# Signed tokens
# -------------------------------------------------------------------
def get_serializer(salt: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=settings.SECRET_KEY, salt=salt)
