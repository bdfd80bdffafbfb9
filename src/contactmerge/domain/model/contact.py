"""Tracked contacts: anonymous visitors and the users they turn into."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import Entity, utcnow
from .enums import ActivityType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .user import WebUser


@dataclass(eq=False, kw_only=True)
class Contact(Entity):
    """Identity record for a tracked visitor.

    A contact starts anonymous. It is either promoted in place when a user is
    assigned to it, or retired by pointing it at the contact that absorbed it.
    """

    email: str | None = None
    is_anonymous: bool = True
    created_at: datetime = field(default_factory=utcnow)

    _merged_into_id: UUID | None = field(default=None, repr=False)
    _users: list[WebUser] = field(default_factory=list["WebUser"], repr=False)

    @property
    def users(self) -> tuple[WebUser, ...]:
        return tuple(self._users)

    @property
    def merged_into_id(self) -> UUID | None:
        return self._merged_into_id

    @property
    def is_merged(self) -> bool:
        return self._merged_into_id is not None

    def assign_user(self, user: WebUser) -> None:
        """Link ``user`` to this contact, promoting it out of anonymity.

        The user's email is adopted when the contact has none so later lookups
        by email resolve to this contact.
        """
        if self.is_merged:
            raise ValueError("cannot assign a user to a merged contact")
        if any(existing.id == user.id for existing in self._users):
            return
        self._users.append(user)
        self.is_anonymous = False
        if not self.email and user.has_email:
            self.email = user.email

    def retire_into(self, target: Contact) -> None:
        """Point this contact at ``target`` after its history has been absorbed."""
        if target.id == self.id:
            raise ValueError("cannot merge a contact into itself")
        if target.is_merged:
            raise ValueError("merge target is itself merged")
        self._merged_into_id = target.id

    def log_activity(
        self,
        activity_type: ActivityType,
        *,
        url: str | None = None,
        site_name: str | None = None,
        occurred_at: datetime | None = None,
    ) -> ContactActivity:
        return ContactActivity(
            contact_id=self.id,
            activity_type=activity_type,
            url=url,
            site_name=site_name,
            occurred_at=occurred_at or utcnow(),
        )


@dataclass(eq=False, kw_only=True)
class ContactActivity(Entity):
    """Something a contact did; merges move these to the surviving contact."""

    contact_id: UUID
    activity_type: ActivityType
    url: str | None = None
    site_name: str | None = None
    occurred_at: datetime = field(default_factory=utcnow)
