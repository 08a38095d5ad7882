"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the storage port every domain-specific
repository extends.  Service-layer code depends on this abstraction, never
on Django ORM directly, so tests can swap in an in-memory store.

Missing records are reported as part of the return value, not by raising:
reads return ``None`` and writes return a ``WriteResult``.  Exceptions are
reserved for genuine storage failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


class WriteResult(Enum):
    """Outcome of a write addressed by primary key."""

    APPLIED = "applied"
    NOT_FOUND = "not_found"
    # Conditional write skipped: the row exists but no longer holds the
    # expected value.
    STALE = "stale"


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def create(self, entity: T) -> T:
        """Persist a new entity and return it with storage-assigned fields."""

    @abstractmethod
    def list(self) -> List[T]:
        """Return every live entity."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, ``None`` when absent."""

    @abstractmethod
    def update_all_columns(self, id: str, entity: T) -> WriteResult:
        """Replace every mutable column of the entity identified by ``id``."""

    @abstractmethod
    def update_single_column(
        self,
        id: str,
        column: str,
        value: Any,
        expected: Optional[Any] = None,
    ) -> WriteResult:
        """Write one column.

        When ``expected`` is given the write only happens if the column
        still holds that value; otherwise ``WriteResult.STALE`` is returned.
        """

    @abstractmethod
    def delete(self, id: str) -> WriteResult:
        """Remove an entity by ID (soft or hard delete)."""
