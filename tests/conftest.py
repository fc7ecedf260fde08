"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests. Every test function gets
its own in-memory SQLite database (aiosqlite) whose schema is created from
SQLModel.metadata, with three registered users and the category reference
data already committed.
"""

import os

# Settings are read when reviewbox is first imported, so the test
# environment must be in place before that import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-review-box-tests-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from reviewbox import models  # noqa: E402, F401
from reviewbox.core.database import get_db  # noqa: E402
from reviewbox.core.security import create_access_token  # noqa: E402
from reviewbox.main import app as main_app  # noqa: E402
from reviewbox.models import Categories, Users  # noqa: E402

# Registered test users: (id, username, display_id, email)
TEST_USERS = [
    ("user-0001", "alice", "100001", "alice@example.com"),
    ("user-0002", "bob", "100002", "bob@example.com"),
    ("user-0003", "carol", "100003", "carol@example.com"),
]

TEST_CATEGORIES = [
    ("cat-drama", "ドラマ", "📺", 1),
    ("cat-restaurant", "レストラン", "🍽️", 2),
    ("cat-book", "本", "📚", 3),
]


def auth_headers(user_id: str, email: str | None = None, expires_delta: timedelta | None = None) -> dict[str, str]:
    """Bearer header carrying a provider-format access token for user_id."""
    token = create_access_token(user_id, email=email, expires_delta=expires_delta)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
async def engine():
    """
    Create a fresh in-memory database for each test function.

    StaticPool keeps the single connection alive so every session in the
    test sees the same in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    Seeds the TEST_USERS and TEST_CATEGORIES rows and commits them so they
    are visible to the API under test.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        for user_id, username, display_id, email in TEST_USERS:
            session.add(Users(id=user_id, username=username, display_id=display_id, email=email))
        for category_id, name, icon, order_index in TEST_CATEGORIES:
            session.add(Categories(id=category_id, name=name, icon=icon, order_index=order_index))
        await session.commit()

        yield session

        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/v1/categories")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Auth Fixtures
# =============================================================================


@pytest.fixture
def owner_headers() -> dict[str, str]:
    """Headers for user-0001 (alice), who owns the groups created by sample fixtures."""
    return auth_headers("user-0001", email="alice@example.com")


@pytest.fixture
def member_headers() -> dict[str, str]:
    """Headers for user-0002 (bob)."""
    return auth_headers("user-0002", email="bob@example.com")


@pytest.fixture
def outsider_headers() -> dict[str, str]:
    """Headers for user-0003 (carol), who is not in any sample group."""
    return auth_headers("user-0003", email="carol@example.com")


# =============================================================================
# Sample Data Dictionaries (for API request payloads)
# =============================================================================


@pytest.fixture
def sample_group_data() -> dict:
    """Request body for creating a restaurant review group."""
    return {
        "name": "Lunch spots",
        "description": "Places near the office",
        "categoryId": "cat-restaurant",
        "isPrivate": True,
        "metadataFields": [
            {"key": "area", "label": "Area", "type": "text"},
            {"key": "genre", "label": "Genre", "type": "select", "options": ["Ramen", "Curry"]},
        ],
        "evaluationCriteria": ["Taste", "Price"],
    }


# =============================================================================
# Factory Fixtures
# =============================================================================
# These create data through the API (or directly for memberships) and return
# plain dicts, so tests never touch ORM attributes after a request.


@pytest.fixture
def make_headers():
    """Expose auth_headers to tests that need tokens for other users."""
    return auth_headers


@pytest.fixture
def create_group(client: AsyncClient, owner_headers: dict, sample_group_data: dict):
    """
    Create a review group through the API and return its detail body.

    Usage:
        group = await create_group(evaluationCriteria=["Taste", "Price"])
        criteria_ids = [c["id"] for c in group["evaluation_criteria"]]
    """

    async def _create(headers: dict | None = None, **overrides) -> dict:
        headers = headers or owner_headers
        body = {**sample_group_data, **overrides}
        response = await client.post("/api/v1/review-groups", json=body, headers=headers)
        assert response.status_code == 201, response.text
        group_id = response.json()["review_group"]["id"]
        detail = await client.get(f"/api/v1/review-groups/{group_id}", headers=headers)
        assert detail.status_code == 200, detail.text
        return detail.json()["group"]

    return _create


@pytest.fixture
def add_member(db_session: AsyncSession):
    """Insert an active membership directly."""
    from reviewbox.models import ReviewGroupMembers

    async def _add(group_id: str, user_id: str, role: str = "member") -> None:
        db_session.add(ReviewGroupMembers(review_group_id=group_id, user_id=user_id, role=role))
        await db_session.commit()

    return _add


@pytest.fixture
def create_subject(client: AsyncClient, owner_headers: dict):
    """Create a subject through the API and return it."""

    async def _create(group_id: str, headers: dict | None = None, **overrides) -> dict:
        body = {"name": "Ramen Taro", "metadata": {"area": "Shibuya", "genre": "Ramen"}, **overrides}
        response = await client.post(
            f"/api/v1/review-groups/{group_id}/subjects",
            json=body,
            headers=headers or owner_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["subject"]

    return _create


@pytest.fixture
def create_review(client: AsyncClient, owner_headers: dict):
    """
    Review a subject through the API, scoring the group's criteria in order.

    Returns the response body's review ({id, total_score}).
    """

    async def _create(
        group: dict, subject_id: str, scores: list[int], headers: dict | None = None, comment: str | None = None
    ) -> dict:
        criteria_ids = [criterion["id"] for criterion in group["evaluation_criteria"]]
        body = {"scores": dict(zip(criteria_ids, scores, strict=True)), "comment": comment}
        response = await client.post(
            f"/api/v1/review-groups/{group['id']}/subjects/{subject_id}/reviews",
            json=body,
            headers=headers or owner_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["review"]

    return _create
