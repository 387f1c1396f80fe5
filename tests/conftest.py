import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base
from tests.mocks.recording_email import RecordingEmailBackend


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine for tests."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Async session bound to the in-memory engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def email_backend():
    return RecordingEmailBackend()


@pytest_asyncio.fixture
async def app_with_db(session_factory, email_backend):
    """FastAPI app wired to the in-memory database and a recording mail backend.

    ASGITransport does not run the lifespan, so app state is set here.
    """
    from app.main import app

    original_state = dict(app.state._state)
    app.state.session_factory = session_factory
    app.state.email_backend = email_backend

    yield app

    app.state._state.clear()
    app.state._state.update(original_state)


@pytest_asyncio.fixture
async def client(app_with_db):
    transport = ASGITransport(app=app_with_db)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
