"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select

from contactmerge.adapters.sqlalchemy.mappings import (
    contact_activity_table,
    contact_table,
    web_user_table,
)
from contactmerge.domain.model import Contact, ContactActivity, WebUser

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyContactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Contact) -> None:
        self.session.add(entity)

    def get(self, contact_id: UUID) -> Contact | None:
        return self.session.get(Contact, contact_id)

    def find_by_email(self, email: str) -> Contact | None:
        """Return the surviving contact for ``email``, compared case-insensitively.

        Retired contacts are skipped; when several remain, the oldest wins.
        """
        stmt = (
            select(Contact)
            .where(func.lower(contact_table.c.email) == email.strip().lower())
            .where(contact_table.c._merged_into_id.is_(None))  # noqa: SLF001
            .order_by(contact_table.c.created_at)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: WebUser) -> None:
        self.session.add(entity)

    def find_by_user_name(self, user_name: str) -> WebUser | None:
        stmt = select(WebUser).where(web_user_table.c.user_name == user_name)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyActivityRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ContactActivity) -> None:
        self.session.add(entity)

    def list_for_contact(self, contact_id: UUID) -> list[ContactActivity]:
        stmt = (
            select(ContactActivity)
            .where(contact_activity_table.c.contact_id == contact_id)
            .order_by(contact_activity_table.c.occurred_at)
        )
        return list(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from contactmerge.domain.ports.persistence import (
        ActivityRepository,
        ContactRepository,
        UserRepository,
    )

    _session_stub = cast("Session", object())
    _contact_repo: ContactRepository = SqlAlchemyContactRepository(_session_stub)
    _user_repo: UserRepository = SqlAlchemyUserRepository(_session_stub)
    _activity_repo: ActivityRepository = SqlAlchemyActivityRepository(_session_stub)
