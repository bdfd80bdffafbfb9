"""Ports for persisting contacts, users, and their history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contactmerge.domain.model import Contact, ContactActivity, WebUser

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ContactRepository(Repository[Contact], Protocol):
    """Persistence contract for contacts."""

    def get(self, contact_id: UUID) -> Contact | None: ...

    def find_by_email(self, email: str) -> Contact | None: ...


@runtime_checkable
class UserDirectory(Protocol):
    """Lookup of authenticated users by normalized name."""

    def find_by_user_name(self, user_name: str) -> WebUser | None: ...


@runtime_checkable
class UserRepository(UserDirectory, Repository[WebUser], Protocol):
    """Persistence contract for users."""


@runtime_checkable
class ActivityRepository(Repository[ContactActivity], Protocol):
    """Persistence contract for contact activities."""

    def list_for_contact(self, contact_id: UUID) -> list[ContactActivity]: ...
