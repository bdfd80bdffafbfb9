"""Authenticated principals known to the user directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class WebUser(Entity):
    """A user account; ``user_name`` is stored in normalized form."""

    user_name: str
    email: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())
