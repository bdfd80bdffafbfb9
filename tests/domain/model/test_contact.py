from __future__ import annotations

from datetime import UTC, datetime

import pytest

from contactmerge.domain.model import ActivityType, Contact, WebUser


def test_new_contact_is_anonymous() -> None:
    contact = Contact()

    assert contact.is_anonymous
    assert contact.users == ()
    assert contact.merged_into_id is None
    assert not contact.is_merged


def test_assign_user_promotes_and_adopts_email() -> None:
    user = WebUser(user_name="alice", email="alice@example.com")
    contact = Contact()

    contact.assign_user(user)
    contact.assign_user(user)

    assert contact.users == (user,)
    assert not contact.is_anonymous
    assert contact.email == "alice@example.com"


def test_assign_user_keeps_existing_email() -> None:
    contact = Contact(email="first@example.com")

    contact.assign_user(WebUser(user_name="alice", email="alice@example.com"))

    assert contact.email == "first@example.com"


def test_assign_user_rejects_merged_contact() -> None:
    contact = Contact()
    contact.retire_into(Contact())

    with pytest.raises(ValueError, match="merged contact"):
        contact.assign_user(WebUser(user_name="alice"))


def test_retire_into_records_target() -> None:
    source = Contact()
    target = Contact()

    source.retire_into(target)

    assert source.is_merged
    assert source.merged_into_id == target.id


def test_retire_into_rejects_self_and_merged_targets() -> None:
    contact = Contact()
    retired = Contact()
    retired.retire_into(Contact())

    with pytest.raises(ValueError, match="itself"):
        contact.retire_into(contact)
    with pytest.raises(ValueError, match="itself merged"):
        contact.retire_into(retired)


def test_log_activity_targets_contact() -> None:
    contact = Contact()
    occurred_at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    activity = contact.log_activity(
        ActivityType.PAGE_VISIT,
        url="https://a.example.com/",
        site_name="sitea",
        occurred_at=occurred_at,
    )

    assert activity.contact_id == contact.id
    assert activity.activity_type is ActivityType.PAGE_VISIT
    assert activity.occurred_at == occurred_at


@pytest.mark.parametrize(("email", "expected"), [(None, False), ("", False), (" ", False), ("a@b", True)])
def test_user_has_email(email: str | None, expected: bool) -> None:
    assert WebUser(user_name="alice", email=email).has_email is expected
