from datetime import datetime
from typing import Any, AsyncGenerator, List, Optional, Type
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.pool import StaticPool

from smartcrm.ai import AIUnavailableError
from smartcrm.core.database import Base
from smartcrm.core.database.entities import Company, Contact, Event
from smartcrm.server.services.sync_channel import SyncChannel

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StubExtractor:
    """Stands in for ``StructuredExtractor``; returns ``output`` or raises ``error``."""

    def __init__(self, output: Any = None, error: Optional[Exception] = None):
        self.output = output
        self.error = error
        self.prompts: List[str] = []
        self.output_types: List[Type[BaseModel]] = []

    async def extract(self, prompt: str, output_type: Type[BaseModel]) -> Any:
        self.prompts.append(prompt)
        self.output_types.append(output_type)
        if self.error is not None:
            raise self.error
        return self.output


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    from smartcrm.core.database import entities  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest.fixture
def extractor() -> StubExtractor:
    """An extractor with no model configured, unless a test sets ``output``."""
    return StubExtractor(error=AIUnavailableError())


@pytest.fixture
def channel() -> SyncChannel:
    return SyncChannel("test_sync")


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, extractor: StubExtractor, channel: SyncChannel
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from smartcrm.ai import get_extractor
    from smartcrm.core.database import get_session
    from smartcrm.server.main import app
    from smartcrm.server.services.sync_channel import get_sync_channel

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_extractor] = lambda: extractor
    app.dependency_overrides[get_sync_channel] = lambda: channel

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("smartcrm.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def company(session: AsyncSession) -> Company:
    company = Company(name="Acme Corp", industry="Manufacturing")
    session.add(company)
    await session.commit()
    await session.refresh(company)
    return company


@pytest_asyncio.fixture
async def contact(session: AsyncSession, company: Company) -> Contact:
    contact = Contact(first_name="Jane", last_name="Doe", email="jane@acme.test", company_id=company.id)
    session.add(contact)
    await session.commit()
    await session.refresh(contact)
    return contact


@pytest_asyncio.fixture
async def event(session: AsyncSession) -> Event:
    event = Event(name="RoboExpo 2026", location="Berlin", start_date=datetime(2026, 3, 14, 9, 0))
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event
