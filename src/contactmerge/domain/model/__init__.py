"""Public domain model surface."""

from __future__ import annotations

from contactmerge.domain.model.audit import ContactMerge
from contactmerge.domain.model.base import Entity, new_id, utcnow
from contactmerge.domain.model.contact import Contact, ContactActivity
from contactmerge.domain.model.enums import ActivityType, MergeReason
from contactmerge.domain.model.user import WebUser

__all__ = [
    "ActivityType",
    "Contact",
    "ContactActivity",
    "ContactMerge",
    "Entity",
    "MergeReason",
    "WebUser",
    "new_id",
    "utcnow",
]
