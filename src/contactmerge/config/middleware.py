"""Configuration for the request middleware that triggers contact merges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, cast, get_args

from contactmerge.domain.request_context import SameSite

from .env import env_flag, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_COOKIE_MAX_AGE_DAYS: Final[int] = 365
DEFAULT_COOKIE_PATH: Final[str] = "/"


@dataclass(frozen=True, slots=True)
class MergeMiddlewareConfig:
    site_name: str
    cookie_domain: str | None = None
    cookie_path: str = DEFAULT_COOKIE_PATH
    cookie_max_age_days: int = DEFAULT_COOKIE_MAX_AGE_DAYS
    cookie_secure: bool = True
    cookie_samesite: SameSite = "lax"
    tracking_enabled: bool = True
    honor_do_not_track: bool = True
    raise_errors: bool = False


def _samesite(name: str, *, default: SameSite) -> SameSite:
    value = optional_env_var(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered not in get_args(SameSite):
        raise ConfigurationError(f"Invalid SameSite value for {name}: {value!r}")
    return cast("SameSite", lowered)


def get_merge_middleware_config() -> MergeMiddlewareConfig:
    values = require_env_vars(("CONTACTMERGE_SITE_NAME",))
    return MergeMiddlewareConfig(
        site_name=values["CONTACTMERGE_SITE_NAME"].strip(),
        cookie_domain=optional_env_var("CONTACTMERGE_COOKIE_DOMAIN"),
        cookie_path=optional_env_var("CONTACTMERGE_COOKIE_PATH") or DEFAULT_COOKIE_PATH,
        cookie_max_age_days=env_int(
            "CONTACTMERGE_COOKIE_MAX_AGE_DAYS", default=DEFAULT_COOKIE_MAX_AGE_DAYS
        ),
        cookie_secure=env_flag("CONTACTMERGE_COOKIE_SECURE", default=True),
        cookie_samesite=_samesite("CONTACTMERGE_COOKIE_SAMESITE", default="lax"),
        tracking_enabled=env_flag("CONTACTMERGE_TRACKING_ENABLED", default=True),
        honor_do_not_track=env_flag("CONTACTMERGE_HONOR_DO_NOT_TRACK", default=True),
        raise_errors=env_flag("CONTACTMERGE_RAISE_ERRORS", default=False),
    )
