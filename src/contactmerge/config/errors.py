"""Errors raised while loading contactmerge settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but cannot be parsed (bad flag, integer or SameSite value)."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable such as ``CONTACTMERGE_SITE_NAME`` is unset or blank."""
