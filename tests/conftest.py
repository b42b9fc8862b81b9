"""Shared test fixtures."""

from collections.abc import AsyncIterator
from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.exceptions import NotFound, StorageError
from app.db.base import Base
from app.db.session import get_db
from app.db.vector_store import QdrantBMIStore, create_qdrant_client
from app.main import create_application
from app.models.bmi_record import BMIRecord


@pytest.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_maker) -> AsyncIterator[AsyncSession]:
    """Create async session for testing."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def qdrant_store() -> AsyncIterator[QdrantBMIStore]:
    """In-process Qdrant collection."""
    client = create_qdrant_client(":memory:")
    store = QdrantBMIStore(client, "bmi_records_test")
    await store.create_collection()
    yield store
    await client.close()


@pytest.fixture
def app(session_maker):
    """Application wired to the SQLite test engine; no vector store unless a test sets one."""
    application = create_application()

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.state.vector_store = None
    return application


@pytest.fixture
async def client(app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# In-memory stores for service tests
# =============================================================================


class InMemoryRecordStore:
    """Dict-backed record store that mimics auto-increment ids and row counts."""

    def __init__(self) -> None:
        self.rows: dict[int, BMIRecord] = {}
        self.next_id = 1
        self.insert_calls = 0
        self.update_calls = 0

    async def insert(self, height, weight, value, created_at):
        self.insert_calls += 1
        record_id = self.next_id
        self.next_id += 1
        self.rows[record_id] = BMIRecord(
            id=record_id, height=height, weight=weight, value=value, created_at=created_at
        )
        return record_id

    async def get_by_id(self, record_id):
        if record_id not in self.rows:
            raise NotFound("BMI record not found")
        return self.rows[record_id]

    async def get_all(self):
        return list(self.rows.values())

    async def update_by_id(self, record_id, height, weight, value):
        self.update_calls += 1
        row = self.rows.get(record_id)
        if row is None:
            return 0
        row.height, row.weight, row.value = height, weight, value
        return 1

    async def delete_by_id(self, record_id):
        return 1 if self.rows.pop(record_id, None) is not None else 0


class FailingRecordStore:
    """Record store whose every call fails the way SQLBMIStore does on a driver error."""

    detail = "(sqlite3.OperationalError) disk I/O error [SQL: SELECT bmi_records.id FROM bmi_records]"

    async def insert(self, height, weight, value, created_at):
        raise StorageError("failed to insert BMI record", detail=self.detail)

    async def get_by_id(self, record_id):
        raise StorageError(f"failed to fetch BMI record {record_id}", detail=self.detail)

    async def get_all(self):
        raise StorageError("failed to list BMI records", detail=self.detail)

    async def update_by_id(self, record_id, height, weight, value):
        raise StorageError(f"failed to update BMI record {record_id}", detail=self.detail)

    async def delete_by_id(self, record_id):
        raise StorageError(f"failed to delete BMI record {record_id}", detail=self.detail)


class RecordingVectorStore:
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.points: dict[int, tuple[list[float], dict]] = {}
        self.queries: list[list[float]] = []
        self.fail_with = fail_with

    async def create_collection(self):
        return None

    async def upsert(self, point_id, vector, payload):
        if self.fail_with is not None:
            raise self.fail_with
        self.points[point_id] = (vector, payload)

    async def nearest_neighbors(self, query_vector, limit=10, include_payload=True):
        if self.fail_with is not None:
            raise self.fail_with
        self.queries.append(query_vector)
        return []

    async def collection_info(self):
        if self.fail_with is not None:
            raise self.fail_with
        return {"name": "recording", "points_count": len(self.points)}


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def vector_store() -> RecordingVectorStore:
    return RecordingVectorStore()


@pytest.fixture
def failing_vector_store() -> RecordingVectorStore:
    return RecordingVectorStore(fail_with=StorageError("failed to upsert point", detail="connection refused"))


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)
