"""Reference-token storage: which contact the current client is associated with."""

from __future__ import annotations

import uuid
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.config.contacts import DEFAULT_REFERENCE_COOKIE_NAME
from contactmerge.domain.request_context import CookieOptions

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from contactmerge.domain.model import Contact
    from contactmerge.domain.ports import ContactRepository
    from contactmerge.domain.request_context import ResponseCookieWriter

log = getLogger(__name__)


def encode_contact_reference(contact_id: uuid.UUID) -> str:
    return str(contact_id)


def decode_contact_reference(value: str | None) -> uuid.UUID | None:
    """Parse a reference cookie value, returning ``None`` for anything malformed."""
    if value is None or not value.strip():
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        log.debug("Ignoring malformed contact reference: %r", value)
        return None


def _resolve(contacts: ContactRepository, contact_id: uuid.UUID) -> Contact | None:
    contact = contacts.get(contact_id)
    if contact is None:
        return None
    # Follow a retired contact to the one that absorbed it.
    if contact.merged_into_id is not None:
        return contacts.get(contact.merged_into_id)
    return contact


class CookieContactPersistentStorage:
    """Keep the current contact's id in a cookie.

    Reads come from the request cookies; writes go to ``response_cookies`` and are
    visible to later reads within the same request.
    """

    def __init__(
        self,
        *,
        contacts: ContactRepository,
        request_cookies: Mapping[str, str],
        response_cookies: ResponseCookieWriter,
        cookie_name: str = DEFAULT_REFERENCE_COOKIE_NAME,
        cookie_options: Callable[[], CookieOptions] | None = None,
    ) -> None:
        self.contacts = contacts
        self.request_cookies = request_cookies
        self.response_cookies = response_cookies
        self.cookie_name = cookie_name
        self._cookie_options = cookie_options or CookieOptions
        self._written: Contact | None = None

    def get_persistent_contact(self) -> Contact | None:
        if self._written is not None:
            return self._written
        contact_id = decode_contact_reference(self.request_cookies.get(self.cookie_name))
        if contact_id is None:
            return None
        contact = _resolve(self.contacts, contact_id)
        if contact is None:
            log.debug("Contact reference %s no longer resolves", contact_id)
        return contact

    def set_persistent_contact(self, contact: Contact) -> None:
        self._written = contact
        self.response_cookies.set_cookie(
            self.cookie_name,
            encode_contact_reference(contact.id),
            self._cookie_options(),
        )


class InMemoryContactPersistentStorage:
    """Hold the contact reference in memory, for command line and batch use."""

    def __init__(self, contacts: ContactRepository, contact_id: uuid.UUID | None = None) -> None:
        self.contacts = contacts
        self.contact_id = contact_id

    def get_persistent_contact(self) -> Contact | None:
        if self.contact_id is None:
            return None
        return _resolve(self.contacts, self.contact_id)

    def set_persistent_contact(self, contact: Contact) -> None:
        self.contact_id = contact.id


if TYPE_CHECKING:
    from typing import cast

    from contactmerge.domain.ports import ContactPersistentStorage

    _repo_stub = cast("ContactRepository", object())
    _memory_check: ContactPersistentStorage = InMemoryContactPersistentStorage(_repo_stub)
