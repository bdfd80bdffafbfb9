"""SQLAlchemy-backed implementations of the contact manager's capabilities."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from contactmerge.domain.model import Contact

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from contactmerge.domain.model import WebUser

log = getLogger(__name__)


class SqlAlchemyContactCreator:
    """Create anonymous contacts and flush them so they have a row immediately."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_anonymous_contact(self) -> Contact:
        contact = Contact(is_anonymous=True)
        self.session.add(contact)
        self.session.flush()
        log.debug("Created anonymous contact %s", contact.id)
        return contact


class SqlAlchemyContactRelationAssigner:
    def __init__(self, session: Session) -> None:
        self.session = session

    def assign(self, user: WebUser, contact: Contact) -> None:
        contact.assign_user(user)
        self.session.add(contact)
        self.session.flush()


if TYPE_CHECKING:
    from contactmerge.domain.ports import ContactCreator, ContactRelationAssigner

    _session_stub = cast("Session", object())
    _creator_check: ContactCreator = SqlAlchemyContactCreator(_session_stub)
    _assigner_check: ContactRelationAssigner = SqlAlchemyContactRelationAssigner(_session_stub)
