"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ActivityType(StrEnum):
    PAGE_VISIT = "page_visit"
    LOGIN = "login"
    FORM_SUBMISSION = "form_submission"
    CUSTOM = "custom"


class MergeReason(StrEnum):
    """Why two contacts were merged."""

    ANONYMOUS_LOGIN = "anonymous_login"
    MANUAL = "manual"
