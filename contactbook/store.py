# contactbook/store.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from contactbook.errors import ConcurrencyConflict, NotFound
from contactbook.models import Contact
from contactbook.schemas import validate_contact

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ContactStore:
    """
    Ownership-scoped CRUD over the contacts table.

    Every operation takes the caller's user id explicitly and filters on
    (id, owner_user_id). A contact owned by someone else is reported exactly
    like a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, caller_id: str, contact_id: int):
        return select(Contact).where(Contact.id == contact_id, Contact.owner_user_id == caller_id)

    def list(self, caller_id: str) -> List[Contact]:
        q = select(Contact).where(Contact.owner_user_id == caller_id).order_by(Contact.id)
        return list(self.db.execute(q).scalars().all())

    def find(self, caller_id: str, contact_id: int) -> Optional[Contact]:
        return self.db.execute(self._scoped(caller_id, contact_id)).scalar_one_or_none()

    def get(self, caller_id: str, contact_id: int) -> Contact:
        contact = self.find(caller_id, contact_id)
        if contact is None:
            raise NotFound(contact_id)
        return contact

    def exists(self, caller_id: str, contact_id: int) -> bool:
        return self.find(caller_id, contact_id) is not None

    def create(self, caller_id: str, data: Mapping[str, Any]) -> Contact:
        form = validate_contact(data)
        contact = Contact(
            name=form.name,
            phone=form.phone,
            email=form.email,
            owner_user_id=caller_id,
        )
        self.db.add(contact)
        self.db.commit()
        logger.info("Created contact %s for user %s", contact.id, caller_id)
        return contact

    def update(self, caller_id: str, contact_id: int, data: Mapping[str, Any]) -> Contact:
        """
        Overwrite the caller's contact with validated fields.

        data["id"] must match contact_id. If data carries a "version", the
        write only applies to that version of the row. When nothing is
        written, the row is looked up again: gone means NotFound, still
        there means ConcurrencyConflict.
        """
        if _as_int(data.get("id")) != contact_id:
            raise NotFound(contact_id)

        form = validate_contact(data)
        expected_version = _as_int(data.get("version"))

        stmt = (
            update(Contact)
            .where(Contact.id == contact_id, Contact.owner_user_id == caller_id)
            .values(
                name=form.name,
                phone=form.phone,
                email=form.email,
                owner_user_id=caller_id,
                version=Contact.version + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(Contact.version == expected_version)

        result = self.db.execute(stmt)
        if result.rowcount == 0:
            self.db.rollback()
            if not self.exists(caller_id, contact_id):
                raise NotFound(contact_id)
            logger.warning("Concurrent update on contact %s for user %s", contact_id, caller_id)
            raise ConcurrencyConflict(contact_id)

        self.db.commit()
        # the row was written behind the identity map's back
        self.db.expire_all()
        logger.info("Updated contact %s for user %s", contact_id, caller_id)
        return self.get(caller_id, contact_id)

    def delete(self, caller_id: str, contact_id: int) -> None:
        contact = self.find(caller_id, contact_id)
        if contact is not None:
            self.db.delete(contact)
            logger.info("Deleted contact %s for user %s", contact_id, caller_id)
        self.db.commit()
