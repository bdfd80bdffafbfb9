"""Cross-site merge ledger: which sites already merged contacts for a client.

The ledger travels as a cookie holding a JSON array of site names. Non-ASCII
names are written as JSON escapes because response headers are latin-1. Reading
it goes through explicit decode and normalize steps so a mangled value never
leaks into the merge decision.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Final

from pydantic import TypeAdapter, ValidationError

from contactmerge.domain.errors import LedgerDecodeError

_SITES_ADAPTER: Final[TypeAdapter[list[str]]] = TypeAdapter(list[str])


def normalize_site_name(site_name: str) -> str:
    return site_name.strip().lower()


@dataclass(slots=True)
class MergeLedger:
    """Ordered site names; entries are compared case-insensitively."""

    sites: list[str] = field(default_factory=list[str])

    @classmethod
    def from_cookie(cls, value: str) -> MergeLedger:
        try:
            sites = _SITES_ADAPTER.validate_json(value, strict=True)
        except ValidationError as exc:
            raise LedgerDecodeError(
                f"Merge ledger value is not a JSON array of strings: {value!r}"
            ) from exc
        return cls(sites=sites)

    def contains(self, site_name: str) -> bool:
        wanted = normalize_site_name(site_name)
        return any(normalize_site_name(site) == wanted for site in self.sites)

    def add(self, site_name: str) -> None:
        self.sites.append(normalize_site_name(site_name))

    def normalized(self) -> MergeLedger:
        """Return a copy with trimmed, lowercased, de-duplicated, non-blank entries."""
        seen: set[str] = set()
        sites: list[str] = []
        for site in self.sites:
            cleaned = normalize_site_name(site)
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            sites.append(cleaned)
        return MergeLedger(sites=sites)

    def to_cookie(self) -> str:
        return json.dumps(self.normalized().sites, ensure_ascii=True, separators=(",", ":"))
