"""Exercise SQLAlchemy contact, user and activity repositories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session  # noqa: TC002

from contactmerge.adapters.sqlalchemy import (
    SqlAlchemyActivityRepository,
    SqlAlchemyContactCreator,
    SqlAlchemyContactRelationAssigner,
    SqlAlchemyContactRepository,
    SqlAlchemyUserRepository,
)
from contactmerge.domain.model import ActivityType, Contact, WebUser


def test_contact_round_trip(sqlite_session: Session) -> None:
    repo = SqlAlchemyContactRepository(sqlite_session)
    contact = Contact(email="alice@example.com", is_anonymous=False)
    repo.add(contact)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repo.get(contact.id)

    assert loaded is not None
    assert loaded.email == "alice@example.com"
    assert loaded.is_anonymous is False
    assert loaded.created_at.tzinfo is not None


def test_find_by_email_ignores_case_and_retired_contacts(sqlite_session: Session) -> None:
    repo = SqlAlchemyContactRepository(sqlite_session)
    base = datetime(2024, 1, 1, tzinfo=UTC)
    retired = Contact(email="alice@example.com", created_at=base)
    survivor = Contact(email="Alice@Example.com", created_at=base + timedelta(days=1))
    newer = Contact(email="alice@example.com", created_at=base + timedelta(days=2))
    for contact in (retired, survivor, newer):
        repo.add(contact)
    sqlite_session.flush()
    retired.retire_into(survivor)
    sqlite_session.commit()

    found = repo.find_by_email(" ALICE@example.com ")

    assert found is survivor
    assert repo.find_by_email("bob@example.com") is None


def test_user_lookup_by_name(sqlite_session: Session) -> None:
    repo = SqlAlchemyUserRepository(sqlite_session)
    user = WebUser(user_name="alice", email="alice@example.com")
    repo.add(user)
    sqlite_session.commit()

    assert repo.find_by_user_name("alice") is user
    assert repo.find_by_user_name("Alice") is None


def test_creator_and_assigner_persist_contact_links(sqlite_session: Session) -> None:
    user = WebUser(user_name="alice", email="alice@example.com")
    sqlite_session.add(user)
    contact = SqlAlchemyContactCreator(sqlite_session).create_anonymous_contact()

    SqlAlchemyContactRelationAssigner(sqlite_session).assign(user, contact)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = SqlAlchemyContactRepository(sqlite_session).get(contact.id)
    assert loaded is not None
    assert [linked.user_name for linked in loaded.users] == ["alice"]
    assert loaded.is_anonymous is False
    assert loaded.email == "alice@example.com"


def test_activities_listed_in_order(sqlite_session: Session) -> None:
    contacts = SqlAlchemyContactRepository(sqlite_session)
    activities = SqlAlchemyActivityRepository(sqlite_session)
    contact = Contact()
    other = Contact()
    contacts.add(contact)
    contacts.add(other)
    sqlite_session.flush()
    base = datetime(2024, 1, 1, tzinfo=UTC)
    activities.add(contact.log_activity(ActivityType.LOGIN, occurred_at=base + timedelta(hours=1)))
    activities.add(contact.log_activity(ActivityType.PAGE_VISIT, occurred_at=base))
    activities.add(other.log_activity(ActivityType.PAGE_VISIT, occurred_at=base))
    sqlite_session.commit()

    listed = activities.list_for_contact(contact.id)

    assert [activity.activity_type for activity in listed] == [
        ActivityType.PAGE_VISIT,
        ActivityType.LOGIN,
    ]
