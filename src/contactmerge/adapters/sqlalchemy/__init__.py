"""SQLAlchemy adapter package for contactmerge."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .merger import SqlAlchemyContactMergeService
from .repositories import (
    SqlAlchemyActivityRepository,
    SqlAlchemyContactRepository,
    SqlAlchemyUserRepository,
)
from .services import SqlAlchemyContactCreator, SqlAlchemyContactRelationAssigner

__all__ = [
    "SqlAlchemyActivityRepository",
    "SqlAlchemyContactCreator",
    "SqlAlchemyContactMergeService",
    "SqlAlchemyContactRelationAssigner",
    "SqlAlchemyContactRepository",
    "SqlAlchemyUserRepository",
    "mapper_registry",
    "start_mappers",
]
