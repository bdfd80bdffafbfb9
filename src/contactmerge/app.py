"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.adapters.cookies import InMemoryContactPersistentStorage
from contactmerge.adapters.processing import StaticProcessingChecker
from contactmerge.adapters.sqlalchemy import (
    SqlAlchemyContactCreator,
    SqlAlchemyContactMergeService,
    SqlAlchemyContactRelationAssigner,
)
from contactmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    is_started,
    startup,
)
from contactmerge.domain.contact_manager import ContactManager
from contactmerge.domain.model import ActivityType, WebUser
from contactmerge.domain.normalization import UserNameNormalizer
from contactmerge.domain.ports.unit_of_work import ContactUnitOfWork

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from contactmerge.config import ContactManagerConfig
    from contactmerge.domain.model import Contact
    from contactmerge.domain.ports import ContactPersistentStorage, ProcessingChecker

UnitOfWorkFactory = Callable[[], SqlAlchemyContactUnitOfWork]
RepositoryUnitOfWorkFactory = Callable[[], ContactUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class ContactSummary:
    id: UUID
    email: str | None
    is_anonymous: bool
    merged_into_id: UUID | None
    user_names: tuple[str, ...]
    activity_count: int


def _default_unit_of_work() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyContactUnitOfWork


def build_contact_manager(
    uow: SqlAlchemyContactUnitOfWork,
    *,
    persistent_storage: Callable[[], ContactPersistentStorage],
    processing_checker: Callable[[], ProcessingChecker] = StaticProcessingChecker,
    config: ContactManagerConfig | None = None,
) -> ContactManager:
    """Wire a contact manager to the session held by ``uow``."""

    session = uow.session
    repositories = uow.repositories
    return ContactManager(
        normalizer=UserNameNormalizer(),
        users=repositories.users,
        contacts=repositories.contacts,
        processing_checker=processing_checker,
        contact_creator=lambda: SqlAlchemyContactCreator(session),
        relation_assigner=lambda: SqlAlchemyContactRelationAssigner(session),
        persistent_storage=persistent_storage,
        merge_service=lambda: SqlAlchemyContactMergeService(session),
        config=config,
    )


def create_user(
    *,
    user_name: str,
    email: str | None = None,
    unit_of_work_factory: RepositoryUnitOfWorkFactory | None = None,
) -> WebUser:
    """Create a user with a normalized name; duplicate names are rejected."""

    normalized = UserNameNormalizer().normalize(user_name)
    if not normalized:
        raise ValueError("User name must not be blank")

    effective_uow = unit_of_work_factory or _default_unit_of_work()
    with effective_uow() as uow:
        users = uow.repositories.users
        if users.find_by_user_name(normalized) is not None:
            raise ValueError(f"User already exists: {normalized}")
        user = WebUser(user_name=normalized, email=email.strip() if email else None)
        users.add(user)
        uow.commit()

    log.info("Created user %s (%s)", user.user_name, user.id)
    return user


def merge_user_contact(
    *,
    user_name: str,
    contact_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ContactManagerConfig | None = None,
) -> UUID | None:
    """Run the merge engine outside a web request.

    ``contact_id`` plays the part of the client's reference cookie. Returns the
    contact the reference points at afterwards.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work()
    with effective_uow() as uow:
        storage = InMemoryContactPersistentStorage(uow.repositories.contacts, contact_id)
        manager = build_contact_manager(
            uow,
            persistent_storage=lambda: storage,
            config=config,
        )
        manager.merge(user_name)
        uow.commit()

    return storage.contact_id


def track_visit(
    uow: SqlAlchemyContactUnitOfWork,
    storage: ContactPersistentStorage,
    *,
    url: str | None = None,
    site_name: str | None = None,
    occurred_at: datetime | None = None,
) -> Contact:
    """Record a page visit for the client's contact, creating an anonymous one if needed."""

    contact = storage.get_persistent_contact()
    if contact is None:
        contact = SqlAlchemyContactCreator(uow.session).create_anonymous_contact()
        storage.set_persistent_contact(contact)
    uow.repositories.activities.add(
        contact.log_activity(
            ActivityType.PAGE_VISIT,
            url=url,
            site_name=site_name,
            occurred_at=occurred_at,
        )
    )
    return contact


def describe_contact(
    *,
    email: str | None = None,
    contact_id: UUID | None = None,
    unit_of_work_factory: RepositoryUnitOfWorkFactory | None = None,
) -> ContactSummary | None:
    if (email is None) == (contact_id is None):
        raise ValueError("Provide exactly one of email or contact_id")

    effective_uow = unit_of_work_factory or _default_unit_of_work()
    with effective_uow() as uow:
        contacts = uow.repositories.contacts
        contact = contacts.get(contact_id) if contact_id is not None else None
        if email is not None:
            contact = contacts.find_by_email(email)
        if contact is None:
            return None
        return ContactSummary(
            id=contact.id,
            email=contact.email,
            is_anonymous=contact.is_anonymous,
            merged_into_id=contact.merged_into_id,
            user_names=tuple(user.user_name for user in contact.users),
            activity_count=len(uow.repositories.activities.list_for_contact(contact.id)),
        )
