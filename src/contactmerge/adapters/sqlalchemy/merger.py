"""Merge one contact into another inside a SQLAlchemy session."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import update

from contactmerge.adapters.sqlalchemy.mappings import contact_activity_table
from contactmerge.domain.model import ContactActivity, ContactMerge, MergeReason

if TYPE_CHECKING:
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from contactmerge.domain.model import Contact

log = getLogger(__name__)


class SqlAlchemyContactMergeService:
    """Absorb a source contact's history into a target and retire the source.

    Activities move to the target, users linked to the source are re-linked to
    the target, a missing email is copied over, and an audit row is written.
    """

    def __init__(
        self,
        session: Session,
        *,
        reason: MergeReason = MergeReason.ANONYMOUS_LOGIN,
        performed_by: str | None = None,
    ) -> None:
        self.session = session
        self.reason = reason
        self.performed_by = performed_by

    def merge_contacts(self, source: Contact, target: Contact) -> None:
        if source.id == target.id:
            raise ValueError("cannot merge a contact into itself")

        self.session.flush()
        result = cast(
            "CursorResult[Any]",
            self.session.execute(
                update(ContactActivity)
                .where(contact_activity_table.c.contact_id == source.id)
                .values(contact_id=target.id)
            ),
        )
        moved = result.rowcount

        for user in source.users:
            target.assign_user(user)
        source._users.clear()  # noqa: SLF001

        if not target.email and source.email:
            target.email = source.email

        source.retire_into(target)
        self.session.add(
            ContactMerge(
                source_id=source.id,
                target_id=target.id,
                reason=self.reason,
                created_by=self.performed_by,
            )
        )
        self.session.flush()
        log.info(
            "Merged contact %s into %s (activities moved: %s)", source.id, target.id, moved
        )


if TYPE_CHECKING:
    from contactmerge.domain.ports import ContactMergeService

    _merge_check: ContactMergeService = SqlAlchemyContactMergeService(cast("Session", object()))
