import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import enable_sqlite_savepoints, get_unit_of_work
from tests.fixtures.json_loader import TestDataLoader

FIXED_EMAIL_CODE = "135246"


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest.fixture
def app(db_session):
    app = create_app(ApplicationConfig)
    # Predictable email codes
    app.state.services.code_generator = lambda length: FIXED_EMAIL_CODE

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest.fixture
def register_user(client, test_data):
    """Register through the API and return the LoginResult body."""

    async def _register(**overrides):
        payload = test_data.get_copy("register_payload")
        payload.update(overrides)
        response = await client.post("/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register
