from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contactmerge.adapters.cookies import InMemoryContactPersistentStorage
from contactmerge.app import create_user, describe_contact, merge_user_contact, track_visit
from contactmerge.domain.errors import IdentityMergeError
from contactmerge.domain.model import Contact
from tests.helpers.contacts import FakeContactUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from contactmerge.adapters.sqlalchemy.unit_of_work import SqlAlchemyContactUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemyContactUnitOfWork]


def _visit(uow_factory: UnitOfWorkFactory, contact_id: UUID | None = None) -> UUID:
    with uow_factory() as uow:
        storage = InMemoryContactPersistentStorage(uow.repositories.contacts, contact_id)
        contact = track_visit(uow, storage, url="https://a.example.com/", site_name="sitea")
        uow.commit()
    return contact.id


def test_create_user_normalizes_and_rejects_duplicates(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    user = create_user(
        user_name=" CORP\\Alice ",
        email=" alice@example.com ",
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert user.user_name == "alice"
    assert user.email == "alice@example.com"
    with pytest.raises(ValueError, match="already exists"):
        create_user(user_name="ALICE", unit_of_work_factory=sqlite_unit_of_work)
    with pytest.raises(ValueError, match="blank"):
        create_user(user_name="  ", unit_of_work_factory=sqlite_unit_of_work)


def test_track_visit_reuses_contact(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    contact_id = _visit(sqlite_unit_of_work)

    assert _visit(sqlite_unit_of_work, contact_id) == contact_id

    summary = describe_contact(contact_id=contact_id, unit_of_work_factory=sqlite_unit_of_work)
    assert summary is not None
    assert summary.is_anonymous
    assert summary.activity_count == 2


def test_merge_user_contact_promotes_then_merges(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_user(
        user_name="alice",
        email="alice@example.com",
        unit_of_work_factory=sqlite_unit_of_work,
    )
    first_visitor = _visit(sqlite_unit_of_work)
    second_visitor = _visit(sqlite_unit_of_work)

    promoted = merge_user_contact(
        user_name="Alice",
        contact_id=first_visitor,
        unit_of_work_factory=sqlite_unit_of_work,
    )
    merged = merge_user_contact(
        user_name="alice",
        contact_id=second_visitor,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert promoted == first_visitor
    assert merged == first_visitor
    summary = describe_contact(email="ALICE@example.com", unit_of_work_factory=sqlite_unit_of_work)
    assert summary is not None
    assert summary.id == first_visitor
    assert summary.user_names == ("alice",)
    assert summary.activity_count == 2
    retired = describe_contact(contact_id=second_visitor, unit_of_work_factory=sqlite_unit_of_work)
    assert retired is not None
    assert retired.merged_into_id == first_visitor


def test_merge_user_contact_without_reference_creates_contact(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_user(
        user_name="alice",
        email="alice@example.com",
        unit_of_work_factory=sqlite_unit_of_work,
    )

    contact_id = merge_user_contact(user_name="alice", unit_of_work_factory=sqlite_unit_of_work)

    assert contact_id is not None
    summary = describe_contact(contact_id=contact_id, unit_of_work_factory=sqlite_unit_of_work)
    assert summary is not None
    assert summary.email == "alice@example.com"


def test_merge_user_contact_rolls_back_failures(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_user(user_name="bob", unit_of_work_factory=sqlite_unit_of_work)

    with pytest.raises(IdentityMergeError):
        merge_user_contact(user_name="bob", unit_of_work_factory=sqlite_unit_of_work)


def test_describe_contact_requires_one_key(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with pytest.raises(ValueError, match="exactly one"):
        describe_contact(unit_of_work_factory=sqlite_unit_of_work)
    assert describe_contact(email="nobody@example.com", unit_of_work_factory=sqlite_unit_of_work) is None


def test_user_and_contact_services_run_on_any_unit_of_work() -> None:
    uow = FakeContactUnitOfWork()
    contact = Contact(email="carol@example.com")
    uow.repositories.contacts.add(contact)

    user = create_user(user_name="Carol", unit_of_work_factory=lambda: uow)
    summary = describe_contact(email="CAROL@example.com", unit_of_work_factory=lambda: uow)

    assert uow.repositories.users.find_by_user_name("carol") is user
    assert uow.commits == 1
    assert summary is not None
    assert summary.id == contact.id
    assert summary.activity_count == 0
