"""Errors raised by the contact merge engine and the cross-site gate."""

from __future__ import annotations


class IdentityMergeError(RuntimeError):
    """Raised when contact data for a user cannot be reconciled.

    Failures from collaborators are wrapped in this error; the original exception
    is available as ``__cause__``.
    """


class ArgumentContractError(IdentityMergeError, ValueError):
    """Raised when a required argument is missing or blank."""


class MergeCancelledError(RuntimeError):
    """Raised when the request was cancelled before merging started."""


class LedgerDecodeError(ValueError):
    """Raised when a merge ledger cookie value cannot be decoded."""


def require_text(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise ArgumentContractError(f"{name} must not be empty or whitespace")
    return value


def require_value[T](value: T | None, name: str) -> T:
    if value is None:
        raise ArgumentContractError(f"{name} must not be None")
    return value
