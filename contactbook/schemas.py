# contactbook/schemas.py
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from contactbook.errors import InvalidInput

NAME_MAX_LENGTH = 80
EMAIL_MAX_LENGTH = 50

# ASCII digits only; a 9-character string, never an int
PHONE_RE = re.compile(r"[0-9]{9}")


class ContactForm(BaseModel):
    """
    Validated contact fields as submitted by a user.

    Unknown keys (id, owner_user_id, csrf_token, ...) are dropped, so an
    owner smuggled into a form can never reach the database.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = None
    phone: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_too_long",
                "The name cannot exceed {max_length} characters.",
                {"max_length": NAME_MAX_LENGTH},
            )
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        if not PHONE_RE.fullmatch(value):
            raise PydanticCustomError("phone_format", "Phone number must be exactly 9 digits.")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _check_email_length(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("email_required", "E-mail address is required.")
        if isinstance(value, str) and len(value.strip()) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "email_too_long",
                "The e-mail address cannot exceed {max_length} characters.",
                {"max_length": EMAIL_MAX_LENGTH},
            )
        return value.strip() if isinstance(value, str) else value


def _error_messages(exc: ValidationError) -> Dict[str, str]:
    """First message per field, keyed by field name."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "__all__"
        if field in errors:
            continue
        kind = err.get("type", "")
        if kind == "missing":
            msg = "This field is required."
        elif field == "email" and kind == "value_error":
            msg = "Invalid e-mail address."
        elif kind == "string_type":
            msg = "Expected text."
        else:
            msg = err["msg"]
        errors[field] = msg
    return errors


def validate_contact(data: Mapping[str, Any]) -> ContactForm:
    """Validate raw input; raise InvalidInput with the untouched data on failure."""
    try:
        return ContactForm.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidInput(data, _error_messages(exc)) from exc
