"""Audit records for contact merge decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import utcnow
from .enums import MergeReason

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False)
class ContactMerge:
    """Audit record for a contact absorbed into its surviving counterpart."""

    source_id: UUID
    target_id: UUID
    reason: MergeReason = MergeReason.MANUAL
    created_at: datetime = field(default_factory=utcnow)
    created_by: str | None = None
