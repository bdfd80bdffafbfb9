"""Ports for the collaborators the contact manager delegates to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contactmerge.domain.model import Contact, WebUser


@runtime_checkable
class NameNormalizer(Protocol):
    """Turn a raw principal name into the form stored by the user directory."""

    def normalize(self, user_name: str) -> str: ...


@runtime_checkable
class ProcessingChecker(Protocol):
    """Decide whether contacts may be processed for the current request."""

    def can_process_contact(self) -> bool: ...


@runtime_checkable
class ContactCreator(Protocol):
    def create_anonymous_contact(self) -> Contact: ...


@runtime_checkable
class ContactRelationAssigner(Protocol):
    """Link a user to a contact, promoting the contact in place."""

    def assign(self, user: WebUser, contact: Contact) -> None: ...


@runtime_checkable
class ContactPersistentStorage(Protocol):
    """Client-held reference to the contact associated with the current request."""

    def get_persistent_contact(self) -> Contact | None: ...

    def set_persistent_contact(self, contact: Contact) -> None: ...


@runtime_checkable
class ContactMergeService(Protocol):
    """Absorb ``source`` into ``target`` and retire ``source``."""

    def merge_contacts(self, source: Contact, target: Contact) -> None: ...
