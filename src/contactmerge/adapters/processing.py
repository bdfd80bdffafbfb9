"""Processing checkers deciding whether contacts may be tracked for a request."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

_OPT_OUT_HEADERS = ("dnt", "sec-gpc")


class StaticProcessingChecker:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def can_process_contact(self) -> bool:
        return self.enabled


class HeaderProcessingChecker:
    """Disable processing when tracking is off or the client sent an opt-out signal.

    ``headers`` must be a case-insensitive mapping such as Starlette's ``Headers``.
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        *,
        tracking_enabled: bool = True,
        honor_do_not_track: bool = True,
    ) -> None:
        self.headers = headers
        self.tracking_enabled = tracking_enabled
        self.honor_do_not_track = honor_do_not_track

    def can_process_contact(self) -> bool:
        if not self.tracking_enabled:
            return False
        if self.honor_do_not_track:
            return not any(
                (self.headers.get(name) or "").strip() == "1" for name in _OPT_OUT_HEADERS
            )
        return True
