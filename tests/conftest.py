# tests/conftest.py
import json
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.database import create_engine, create_session_factory, create_tables, get_db
from app.main import create_app
from app.services.blob_storage import LocalBlobStore
from app.services.gemini_gateway import GeminiGateway
from models import AuthSession

TEST_PASSWORD = "correct horse battery staple"
TEST_SESSION_TOKEN = "test-session-token"
TEST_GEMINI_KEY = "test-gemini-key"


class GeminiStub:
    """Stands in for the Gemini REST API behind an ``httpx.MockTransport``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: dict = {"candidates": [{"content": {"parts": [{"text": "stub reply"}]}}]}
        self.text: str | None = None
        self.error: Callable[[httpx.Request], Exception] | None = None

    def reply_with(self, *texts: str):
        self.payload = {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}

    def fail_with(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        master_password=TEST_PASSWORD,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        gemini_api_key=TEST_GEMINI_KEY,
        blob_storage_path=str(tmp_path / "blobs"),
    )


@pytest_asyncio.fixture
async def test_engine(test_settings):
    engine = create_engine(test_settings)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Create a test database session."""
    session_factory = create_session_factory(test_engine)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@pytest.fixture
def blob_store(test_settings) -> LocalBlobStore:
    return LocalBlobStore(test_settings.blob_storage_path)


@pytest.fixture
def gemini_stub() -> GeminiStub:
    return GeminiStub()


@pytest.fixture
def gateway(test_settings, gemini_stub) -> GeminiGateway:
    return GeminiGateway(test_settings, transport=httpx.MockTransport(gemini_stub.handler))


@pytest_asyncio.fixture
async def app(test_settings, test_db, blob_store, gateway):
    """Application wired to the per-test database, blob directory and API stub."""
    application = create_app(test_settings)
    application.state.blob_store = blob_store
    application.state.generation_gateway = gateway
    application.dependency_overrides[get_db] = lambda: test_db
    yield application
    application.dependency_overrides.clear()
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    """Create a test client without a session."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def authenticated_client(app, test_db):
    """Create a test client carrying a live session token."""
    test_db.add(AuthSession(token=TEST_SESSION_TOKEN))
    await test_db.commit()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {TEST_SESSION_TOKEN}"},
    ) as ac:
        yield ac
