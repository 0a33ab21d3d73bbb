"""Pytest configuration and fixtures."""

import copy
import os
from typing import Dict, Generator, List, Optional, Sequence, Set

# Fast password hashing and no background sync loop under test
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SYNC_POLL_INTERVAL_SECONDS", "0")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from frontdesk.container import FrontDeskContainer
from frontdesk.core.exceptions import RemoteDataError
from frontdesk.main import create_app
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import MemoryLocalStore, StorageKeys
from frontdesk.services.remote.base import Filter, OrderBy, RemoteDataService, Row

MUSA = "musa-yaradua"
ADELEKE = "adeleke-adedoyin"


class FakeRemoteDataService(RemoteDataService):
    """In-memory stand-in for the remote tables with failure injection."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, Row]] = {}
        self.calls: List[tuple] = []
        self.failing_tables: Set[str] = set()
        self.fail_all = False

    def fail(self, *tables: str) -> None:
        """Make calls fail: every table when none are named."""
        if tables:
            self.failing_tables.update(tables)
        else:
            self.fail_all = True

    def recover(self) -> None:
        self.failing_tables.clear()
        self.fail_all = False

    def rows(self, table: str) -> List[Row]:
        return list(self.tables.get(table, {}).values())

    def count(self, operation: str, table: Optional[str] = None) -> int:
        return sum(1 for op, tbl, _ in self.calls if op == operation and (table is None or tbl == table))

    def _check(self, table: str, operation: str, payload=None) -> Dict[str, Row]:
        self.calls.append((operation, table, payload))
        if self.fail_all or table in self.failing_tables:
            raise RemoteDataError(table, operation, "simulated outage")
        return self.tables.setdefault(table, {})

    @staticmethod
    def _matches(row: Row, filters: Optional[Sequence[Filter]]) -> bool:
        return all(flt.matches(row) for flt in filters or ())

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        stored = self._check(table, "insert", rows)
        for row in rows:
            if row["id"] in stored:
                raise RemoteDataError(table, "insert", "duplicate key value", status_code=409)
        for row in rows:
            stored[row["id"]] = copy.deepcopy(row)
        return copy.deepcopy(rows)

    async def update(self, table: str, values: Row, filters: Sequence[Filter]) -> List[Row]:
        stored = self._check(table, "update", values)
        updated = []
        for row in stored.values():
            if self._matches(row, filters):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    async def upsert(self, table: str, rows: List[Row], on_conflict: str = "id") -> List[Row]:
        stored = self._check(table, "upsert", rows)
        for row in rows:
            stored.setdefault(row[on_conflict], {}).update(copy.deepcopy(row))
        return copy.deepcopy(rows)

    async def select(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        stored = self._check(table, "select")
        result = [copy.deepcopy(row) for row in stored.values() if self._matches(row, filters)]
        for column, ascending in reversed(list(order or [])):
            result.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=not ascending)
        if limit is not None:
            result = result[:limit]
        return result

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        stored = self._check(table, "delete")
        for key in [key for key, row in stored.items() if self._matches(row, filters)]:
            del stored[key]

    async def ping(self) -> bool:
        return not self.fail_all


@pytest.fixture
def store() -> MemoryLocalStore:
    return MemoryLocalStore()


@pytest.fixture
def keys() -> StorageKeys:
    return StorageKeys()


@pytest.fixture
def remote() -> FakeRemoteDataService:
    return FakeRemoteDataService()


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    return ConnectivityMonitor(online=True)


@pytest.fixture
def container(store, remote, connectivity, keys) -> FrontDeskContainer:
    """Fully wired services over the memory store and the fake remote."""
    return FrontDeskContainer(store, remote, connectivity, keys)


@pytest_asyncio.fixture
async def ready(container: FrontDeskContainer) -> FrontDeskContainer:
    """Container with both branches' rooms seeded."""
    await container.rooms.initialize(MUSA)
    await container.rooms.initialize(ADELEKE)
    return container


@pytest.fixture
def client(container: FrontDeskContainer) -> Generator[TestClient, None, None]:
    """Create a test client over the fake-backed container."""
    from frontdesk.core.rate_limit import limiter

    app = create_app(container)
    # Disable rate limiter during tests to avoid flaky failures
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True
