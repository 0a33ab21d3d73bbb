"""Abstract interface for the remote tabular data service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from frontdesk.core.exceptions import RemoteDataError

Row = Dict[str, Any]
OrderBy = Sequence[Tuple[str, bool]]  # (column, ascending)


@dataclass(frozen=True)
class Filter:
    """A single column predicate.

    ``op`` is one of ``eq`` (column equals value), ``in`` (column is one of
    the values) or ``or_eq`` (column equals any of the values, sent as an
    OR group).
    """

    column: str
    op: str
    value: Any

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column, "eq", value)

    @classmethod
    def in_(cls, column: str, values: Sequence[Any]) -> "Filter":
        return cls(column, "in", tuple(values))

    @classmethod
    def or_eq(cls, column: str, values: Sequence[Any]) -> "Filter":
        return cls(column, "or_eq", tuple(values))

    def matches(self, row: Row) -> bool:
        """Evaluate the predicate against a row (used by in-process services)."""
        current = row.get(self.column)
        if self.op == "eq":
            return current == self.value
        if self.op in ("in", "or_eq"):
            return current in self.value
        raise ValueError(f"Unsupported filter op: {self.op}")


class RemoteDataService(ABC):
    """Network-reachable tabular store.

    Every method may raise :class:`frontdesk.core.exceptions.RemoteDataError`.
    """

    @abstractmethod
    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert new rows; fails if a row id already exists."""

    @abstractmethod
    async def update(self, table: str, values: Row, filters: Sequence[Filter]) -> List[Row]:
        """Update every row matching all filters."""

    @abstractmethod
    async def upsert(self, table: str, rows: List[Row], on_conflict: str = "id") -> List[Row]:
        """Insert rows, merging into existing rows with the same conflict key."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """Return rows matching all filters."""

    @abstractmethod
    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        """Delete every row matching all filters."""

    async def ping(self) -> bool:
        """Return True when the service is reachable."""
        return True


class UnconfiguredDataService(RemoteDataService):
    """Stand-in used when no remote endpoint is configured.

    Every call fails, so all writes stay queued until a real service is
    configured and the install comes online.
    """

    def _fail(self, table: str, operation: str):
        raise RemoteDataError(table, operation, "remote data service is not configured")

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        self._fail(table, "insert")

    async def update(self, table: str, values: Row, filters: Sequence[Filter]) -> List[Row]:
        self._fail(table, "update")

    async def upsert(self, table: str, rows: List[Row], on_conflict: str = "id") -> List[Row]:
        self._fail(table, "upsert")

    async def select(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        self._fail(table, "select")

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        self._fail(table, "delete")

    async def ping(self) -> bool:
        return False
