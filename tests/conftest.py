"""
Shared fixtures: an in-memory SQLite database per test and an authenticated
HTTP client talking to the FastAPI app through ASGI.
"""
import os
from decimal import Decimal
from typing import AsyncGenerator

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_ADMIN"] = "false"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import oficina.models  # noqa: F401
from oficina.auth import hash_password
from oficina.database import Base, get_db
from oficina.main import app
from oficina.models import Client, Part, User, UserRole, Vehicle

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
API = "/api/v1"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging data and calling services directly."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def admin(db) -> User:
    user = User(
        username="admin",
        email="admin@oficina.com.br",
        name="Administrador",
        role=UserRole.ADMIN,
        hashed_password=hash_password("admin123"),
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def anon_client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client without credentials; every request gets its own session."""

    async def get_db_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = get_db_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(anon_client, admin) -> AsyncClient:
    """HTTP client logged in as the admin user."""
    response = await anon_client.post(
        f"{API}/auth/login", json={"username": "admin", "password": "admin123"}
    )
    assert response.status_code == 200
    anon_client.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
    return anon_client


@pytest_asyncio.fixture
async def customer(db) -> Client:
    client = Client(name="João Silva", phone="(11) 99999-8888", email="joao@example.com")
    db.add(client)
    await db.commit()
    return client


@pytest_asyncio.fixture
async def car(db, customer) -> Vehicle:
    vehicle = Vehicle(client_id=customer.id, model="Honda Civic", plate="ABC-1234", year="2020")
    db.add(vehicle)
    await db.commit()
    return vehicle


@pytest_asyncio.fixture
async def stock(db) -> dict:
    """A small parts inventory keyed by code."""
    parts = [
        Part(code="OLT-5W30", name="Óleo de Motor 5W30", category="Lubrificantes",
             purchase_price=Decimal("25.90"), price=Decimal("35.90"), quantity=15, min_quantity=5),
        Part(code="FO-123", name="Filtro de Óleo", category="Filtros",
             purchase_price=Decimal("18.50"), price=Decimal("25.50"), quantity=8, min_quantity=3),
        Part(code="AMD-01", name="Amortecedor Dianteiro", category="Suspensão",
             purchase_price=Decimal("250.00"), price=Decimal("350.00"), quantity=2, min_quantity=1),
        Part(code="BAT-60", name="Bateria 60A", category="Elétrica",
             purchase_price=Decimal("280.00"), price=Decimal("350.00"), quantity=2, min_quantity=2),
    ]
    db.add_all(parts)
    await db.commit()
    return {part.code: part for part in parts}
