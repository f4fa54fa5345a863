"""Pytest fixtures for dispatch board backend tests."""

import asyncio
import json
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.database import init_db
from app.main import app
from app.routers.legacy import collections as legacy_collections
from app.schemas.board import COLLECTIONS, Snapshot
from app.services import mutations
from app.services.board import BoardService, get_board_service
from app.services.local_storage import LocalSnapshotStorage
from app.services.remote_client import RemoteTableClient
from app.services.sync import SyncAdapter
from app.websocket.manager import ConnectionManager

# Test database URL - in-memory SQLite shared through a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
REMOTE_URL = "https://board.example.supabase.co"


class FakeRemoteTables:
    """
    In-memory PostgREST stand-in served through httpx.MockTransport.

    Records every request as (method, table, params) when it is served; selected
    HTTP methods can be delayed (`delays`, seconds) or failed with a 503.
    """

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.tables: dict[str, list[dict[str, Any]]] = {t: [] for t in COLLECTIONS}
        if tables:
            self.tables.update(tables)
        self.requests: list[tuple[str, str, dict[str, str]]] = []
        self.fail_methods: set[str] = set()
        self.delays: dict[str, float] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(self.delays.get(request.method, 0))
        table = request.url.path.rsplit("/", 1)[-1]
        params = dict(request.url.params)
        self.requests.append((request.method, table, params))

        if request.method in self.fail_methods:
            return httpx.Response(503, text="service unavailable")

        rows = self.tables.setdefault(table, [])
        row_id = params.get("id", "").removeprefix("eq.")

        if request.method == "GET":
            column, direction = params.get("order", "id.asc").split(".")
            ordered = sorted(rows, key=lambda r: r[column], reverse=direction == "desc")
            return httpx.Response(200, json=ordered)

        if request.method == "POST":
            rows.extend(json.loads(request.content))
            return httpx.Response(201)

        if request.method == "PATCH":
            fields = json.loads(request.content)
            for row in rows:
                if row["id"] == row_id:
                    row.update(fields)
            return httpx.Response(204)

        if request.method == "DELETE":
            self.tables[table] = [r for r in rows if r["id"] != row_id]
            return httpx.Response(204)

        return httpx.Response(405)

    def methods(self) -> list[str]:
        return [method for method, _, _ in self.requests]


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        remote_url=REMOTE_URL,
        remote_api_key="test_key",
        debug=True,
    )


@pytest_asyncio.fixture
async def async_engine():
    """Create async engine with the board tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def storage(session_maker) -> LocalSnapshotStorage:
    """Local snapshot storage on the in-memory database."""
    return LocalSnapshotStorage(session_maker=session_maker, key="test_board")


@pytest.fixture
def fake_remote() -> FakeRemoteTables:
    return FakeRemoteTables()


@pytest.fixture
def remote_client(fake_remote) -> RemoteTableClient:
    """Remote client wired to the fake table store."""
    return RemoteTableClient(
        base_url=REMOTE_URL,
        api_key="test_key",
        transport=fake_remote.transport,
    )


@pytest.fixture
def sync_adapter(remote_client) -> SyncAdapter:
    return SyncAdapter(remote_client)


@pytest.fixture
def ws_manager() -> ConnectionManager:
    return ConnectionManager()


@pytest.fixture
def board_service(storage, ws_manager) -> BoardService:
    """Board service with local storage and no remote mirror."""
    return BoardService(storage=storage, notifier=ws_manager)


@pytest.fixture
def synced_board_service(storage, sync_adapter, ws_manager) -> BoardService:
    """Board service mirroring to the fake remote store."""
    return BoardService(storage=storage, sync=sync_adapter, notifier=ws_manager)


@pytest_asyncio.fixture
async def client(board_service) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with the board service override."""
    app.dependency_overrides[get_board_service] = lambda: board_service
    legacy_collections.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    await board_service.flush()
    app.dependency_overrides.clear()
    legacy_collections.reset()


@pytest.fixture
def sample_datetime() -> datetime:
    """Sample datetime for testing."""
    return datetime(2024, 1, 18, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def sample_board(sample_datetime) -> Snapshot:
    """
    Board with two units, one group holding Unit 23, a Robbery call and a BOLO.

    Ids are fixed: u_1, u_2, g_1, c_1, b_1.
    """
    board = Snapshot()
    board = mutations.create_unit(board, "Unit 23", "LAPD", "SUP", unit_id="u_1")
    board = mutations.create_unit(board, "Unit 45", "CHP", status="Busy", unit_id="u_2")
    board = mutations.create_group(board, "Alpha", ["u_1"], group_id="g_1")
    board = mutations.create_call(
        board,
        "Robbery",
        address="Main St",
        postal="2001",
        priority="1",
        origin="Radio",
        code="10-68",
        call_id="c_1",
    )
    board = mutations.create_bolo(
        board,
        "Black SUV",
        plate="7ABC123",
        note="Fled north",
        bolo_id="b_1",
        created_at=sample_datetime,
    )
    return mutations.set_dispatch_notes(board, "Shift briefing at 1900")
