"""SQLAlchemy mapping metadata for the contactmerge domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    String,
    Table,
    TypeDecorator,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from contactmerge.domain.model import (
    ActivityType,
    Contact,
    ContactActivity,
    ContactMerge,
    MergeReason,
    WebUser,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

contact_table = Table(
    "contact",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("email", String, nullable=True, index=True),
    Column("is_anonymous", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column(
        "merged_into_id",
        UUIDColumnType,
        ForeignKey("contact.id"),
        key="_merged_into_id",
        nullable=True,
    ),
)

web_user_table = Table(
    "web_user",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("user_name", String, nullable=False, unique=True),
    Column("email", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
)

contact_user_table = Table(
    "contact_user",
    mapper_registry.metadata,
    Column("contact_id", UUIDColumnType, ForeignKey("contact.id"), primary_key=True),
    Column("user_id", UUIDColumnType, ForeignKey("web_user.id"), primary_key=True),
)

contact_activity_table = Table(
    "contact_activity",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("contact_id", UUIDColumnType, ForeignKey("contact.id"), nullable=False, index=True),
    Column("activity_type", Enum(ActivityType, native_enum=False), nullable=False),
    Column("url", String, nullable=True),
    Column("site_name", String, nullable=True),
    Column("occurred_at", UTCDateTime(), nullable=False),
)

contact_merge_table = Table(
    "contact_merge",
    mapper_registry.metadata,
    Column("source_id", UUIDColumnType, primary_key=True),
    Column("target_id", UUIDColumnType, primary_key=True),
    Column("reason", Enum(MergeReason, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column("created_by", String, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(WebUser, web_user_table)

    mapper_registry.map_imperatively(
        Contact,
        contact_table,
        properties={
            "_users": relationship(
                WebUser,
                secondary=contact_user_table,
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(ContactActivity, contact_activity_table)

    mapper_registry.map_imperatively(ContactMerge, contact_merge_table)

    configure_mappers()
    return mapper_registry
