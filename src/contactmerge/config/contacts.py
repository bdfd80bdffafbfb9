"""Contact manager configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, optional_env_var

DEFAULT_LEDGER_COOKIE_NAME: Final[str] = "CurrentContactXsTracker"
DEFAULT_REFERENCE_COOKIE_NAME: Final[str] = "CurrentContact"


@dataclass(frozen=True, slots=True)
class ContactManagerConfig:
    """Options for the contact manager.

    ``validate_reference_against_store`` controls how the reference cookie is
    verified before the cross-site ledger is trusted. By default only the presence
    of the cookie is checked; enabling it resolves the referenced contact through
    persistent storage, which costs a database round trip per request.
    """

    ledger_cookie_name: str = DEFAULT_LEDGER_COOKIE_NAME
    validate_reference_against_store: bool = False
    reference_cookie_name: str = DEFAULT_REFERENCE_COOKIE_NAME


def get_contact_manager_config() -> ContactManagerConfig:
    return ContactManagerConfig(
        ledger_cookie_name=optional_env_var("CONTACTMERGE_LEDGER_COOKIE_NAME")
        or DEFAULT_LEDGER_COOKIE_NAME,
        validate_reference_against_store=env_flag(
            "CONTACTMERGE_VALIDATE_REFERENCE", default=False
        ),
        reference_cookie_name=optional_env_var("CONTACTMERGE_REFERENCE_COOKIE_NAME")
        or DEFAULT_REFERENCE_COOKIE_NAME,
    )
