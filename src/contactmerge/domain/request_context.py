"""Request-scoped state handed to the cross-site merge gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

from contactmerge.domain.errors import MergeCancelledError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from datetime import datetime

SameSite = Literal["lax", "strict", "none"]


@dataclass(frozen=True, slots=True)
class CookieOptions:
    domain: str | None = None
    path: str = "/"
    max_age: int | None = None
    expires: datetime | None = None
    secure: bool = False
    httponly: bool = True
    samesite: SameSite | None = "lax"


@runtime_checkable
class CancellationSignal(Protocol):
    """Anything exposing ``is_set()``, ``threading.Event`` included."""

    def is_set(self) -> bool: ...


@runtime_checkable
class ResponseCookieWriter(Protocol):
    def set_cookie(self, name: str, value: str, options: CookieOptions) -> None: ...


@dataclass(frozen=True, slots=True)
class PendingCookie:
    name: str
    value: str
    options: CookieOptions


class PendingCookies:
    """Cookie writes collected while a request is processed.

    Adapters apply them to the outgoing response once the handler has produced
    one. A later write to the same name replaces the earlier one.
    """

    def __init__(self) -> None:
        self._cookies: dict[str, PendingCookie] = {}

    def set_cookie(self, name: str, value: str, options: CookieOptions) -> None:
        self._cookies[name] = PendingCookie(name=name, value=value, options=options)

    def get(self, name: str) -> str | None:
        pending = self._cookies.get(name)
        return pending.value if pending is not None else None

    def clear(self) -> None:
        self._cookies.clear()

    def __iter__(self) -> Iterator[PendingCookie]:
        return iter(tuple(self._cookies.values()))

    def __len__(self) -> int:
        return len(self._cookies)


@dataclass(slots=True)
class MergeRequestContext:
    """Inbound cookies, the authenticated principal, and where cookie writes go."""

    cookies: Mapping[str, str]
    user_name: str | None
    response_cookies: ResponseCookieWriter
    cancellation: CancellationSignal | None = None

    def raise_if_cancelled(self) -> None:
        if self.cancellation is not None and self.cancellation.is_set():
            raise MergeCancelledError("Request was cancelled before the contact merge started")


class CancellationFlag:
    """Fixed cancellation state sampled once from the transport."""

    __slots__ = ("_cancelled",)

    def __init__(self, cancelled: bool = False) -> None:
        self._cancelled = cancelled

    def is_set(self) -> bool:
        return self._cancelled
