"""Errors raised by ContactStore. Routes translate them into HTTP responses."""

from typing import Any, Dict, Mapping


class ContactError(Exception):
    """Base class for contact store errors."""


class NotFound(ContactError):
    """
    The contact does not exist or belongs to someone else.

    Both cases look the same on purpose, so one user cannot probe for the
    ids of another user's contacts.
    """

    def __init__(self, contact_id: Any):
        super().__init__(f"Contact {contact_id!r} not found")
        self.contact_id = contact_id


class InvalidInput(ContactError):
    """Field validation failed. Carries the rejected input for redisplay."""

    def __init__(self, data: Mapping[str, Any], errors: Dict[str, str]):
        super().__init__("Invalid contact input: " + ", ".join(sorted(errors)))
        self.data = dict(data)
        self.errors = errors


class ConcurrencyConflict(ContactError):
    """The contact changed under us and still exists. Not retried."""

    def __init__(self, contact_id: int):
        super().__init__(f"Contact {contact_id} was modified concurrently")
        self.contact_id = contact_id
