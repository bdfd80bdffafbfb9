"""Domain port definitions for adapters."""

from __future__ import annotations

from .capabilities import (
    ContactCreator,
    ContactMergeService,
    ContactPersistentStorage,
    ContactRelationAssigner,
    NameNormalizer,
    ProcessingChecker,
)
from .persistence import (
    ActivityRepository,
    ContactRepository,
    Repository,
    UserDirectory,
    UserRepository,
)
from .unit_of_work import (
    ContactRepositories,
    ContactUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ActivityRepository",
    "ContactCreator",
    "ContactMergeService",
    "ContactPersistentStorage",
    "ContactRelationAssigner",
    "ContactRepositories",
    "ContactRepository",
    "ContactUnitOfWork",
    "NameNormalizer",
    "ProcessingChecker",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "UserDirectory",
    "UserRepository",
]
