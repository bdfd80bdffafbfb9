"""Reconcile tracked contacts with authenticated users.

``ContactManager.merge`` decides which contact belongs to a user and reuses,
promotes, creates, or merges contacts accordingly. ``contingent_merge`` gates
that decision per site with a client-held ledger so it runs once per site until
the client's contact reference goes missing.
"""

from __future__ import annotations

from functools import cached_property
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.config.contacts import ContactManagerConfig
from contactmerge.domain.errors import (
    IdentityMergeError,
    LedgerDecodeError,
    require_text,
    require_value,
)
from contactmerge.domain.merge_ledger import MergeLedger, normalize_site_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from contactmerge.domain.model import Contact
    from contactmerge.domain.ports import (
        ContactCreator,
        ContactMergeService,
        ContactPersistentStorage,
        ContactRelationAssigner,
        ContactRepository,
        NameNormalizer,
        ProcessingChecker,
        UserDirectory,
    )
    from contactmerge.domain.request_context import CookieOptions, MergeRequestContext

log = getLogger(__name__)


class ContactManager:
    """Merge engine and cross-site gate over injected collaborators.

    Collaborators that may be expensive to build are passed as zero-argument
    factories and resolved on first use.
    """

    def __init__(
        self,
        *,
        normalizer: NameNormalizer,
        users: UserDirectory,
        contacts: ContactRepository,
        processing_checker: Callable[[], ProcessingChecker],
        contact_creator: Callable[[], ContactCreator],
        relation_assigner: Callable[[], ContactRelationAssigner],
        persistent_storage: Callable[[], ContactPersistentStorage],
        merge_service: Callable[[], ContactMergeService],
        config: ContactManagerConfig | None = None,
    ) -> None:
        self.config = config or ContactManagerConfig()
        self._normalizer = normalizer
        self._users = users
        self._contacts = contacts
        self._processing_checker_factory = processing_checker
        self._contact_creator_factory = contact_creator
        self._relation_assigner_factory = relation_assigner
        self._persistent_storage_factory = persistent_storage
        self._merge_service_factory = merge_service

    @cached_property
    def processing_checker(self) -> ProcessingChecker:
        return self._processing_checker_factory()

    @cached_property
    def contact_creator(self) -> ContactCreator:
        return self._contact_creator_factory()

    @cached_property
    def relation_assigner(self) -> ContactRelationAssigner:
        return self._relation_assigner_factory()

    @cached_property
    def persistent_storage(self) -> ContactPersistentStorage:
        return self._persistent_storage_factory()

    @cached_property
    def merge_service(self) -> ContactMergeService:
        return self._merge_service_factory()

    def merge(self, user_name: str) -> None:
        """Associate the current request with the contact belonging to ``user_name``."""

        require_text(user_name, "user_name")

        try:
            self._merge(user_name)
        except Exception as exc:
            log.exception("Contact merge failed: user_name=%s", user_name)
            raise IdentityMergeError(
                "There has been a problem merging the contact data for the specified user."
            ) from exc

    def _merge(self, user_name: str) -> None:
        normalized_name = self._normalizer.normalize(user_name)

        if not self.processing_checker.can_process_contact():
            log.debug("Contact processing disabled for this request: user=%s", normalized_name)
            return

        user = self._users.find_by_user_name(normalized_name)
        if user is None:
            log.debug("No user found for contact merge: user=%s", normalized_name)
            return

        if not user.has_email or user.email is None:
            raise IdentityMergeError(
                f"The user with user_name: {normalized_name} does not have an email address."
            )

        user_contact = self._contacts.find_by_email(user.email)

        # Missing, tampered-with, or stale reference cookies resolve to None.
        token_contact = self.persistent_storage.get_persistent_contact()
        if token_contact is None:
            token_contact = self.contact_creator.create_anonymous_contact()

        if user_contact is not None and user_contact.email == token_contact.email:
            return

        if user_contact is None:
            if token_contact.is_anonymous:
                user_contact = token_contact
            else:
                # The referenced contact belongs to another user.
                user_contact = self.contact_creator.create_anonymous_contact()

            if user_contact.users:
                raise IdentityMergeError(
                    "The contact already has users assigned to it. "
                    f"id: {user_contact.id}, email: {user_contact.email}"
                )

            self.relation_assigner.assign(user, user_contact)
            log.info("Promoted contact %s for user %s", user_contact.id, normalized_name)

        if user_contact.id != token_contact.id and token_contact.is_anonymous:
            self.merge_service.merge_contacts(token_contact, user_contact)
            log.info("Merged contact %s into %s", token_contact.id, user_contact.id)

        self.persistent_storage.set_persistent_contact(user_contact)

    def contingent_merge(
        self,
        context: MergeRequestContext,
        site_name: str,
        reset: bool,
        cookie_options_factory: Callable[[], CookieOptions],
    ) -> None:
        """Run ``merge`` for ``site_name`` unless the ledger says it already ran.

        ``reset`` discards the ledger carried by the request.
        """

        require_value(context, "context")
        context.raise_if_cancelled()
        require_text(site_name, "site_name")
        require_value(cookie_options_factory, "cookie_options_factory")

        try:
            self._contingent_merge(context, site_name, reset, cookie_options_factory)
        except Exception as exc:
            log.exception(
                "Contingent contact merge failed: user_name=%s, reset=%s",
                context.user_name,
                reset,
            )
            raise IdentityMergeError(
                "There has been a problem merging the contact data for the specified user "
                "for the current request."
            ) from exc

    def _contingent_merge(
        self,
        context: MergeRequestContext,
        site_name: str,
        reset: bool,
        cookie_options_factory: Callable[[], CookieOptions],
    ) -> None:
        cookie_name = self.config.ledger_cookie_name
        current_value: str | None = None
        ledger: MergeLedger | None = None

        if not reset:
            current_value = context.cookies.get(cookie_name)
            if current_value and current_value.strip():
                try:
                    ledger = MergeLedger.from_cookie(current_value)
                except LedgerDecodeError as exc:
                    log.warning(
                        "The %s cookie could not be decoded: value=%r",
                        cookie_name,
                        current_value,
                        exc_info=exc,
                    )

        if ledger is None:
            ledger = MergeLedger()

        site = normalize_site_name(site_name)

        # A ledger entry is not enough when the contact reference has gone missing.
        if ledger.contains(site) and self._current_contact_exists(context):
            return

        merge_user_name = require_text(context.user_name, "context.user_name")
        self.merge(merge_user_name)

        ledger.add(site)
        updated_value = ledger.to_cookie()

        if current_value is None or current_value.casefold() != updated_value.casefold():
            context.response_cookies.set_cookie(
                cookie_name, updated_value, cookie_options_factory()
            )
            log.info("Updated merge ledger for %s: %s", merge_user_name, updated_value)

    def _current_contact_exists(self, context: MergeRequestContext) -> bool:
        if self.config.validate_reference_against_store:
            return self.persistent_storage.get_persistent_contact() is not None

        value = context.cookies.get(self.config.reference_cookie_name)
        return bool(value and value.strip())
