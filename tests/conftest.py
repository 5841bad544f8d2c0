"""Pytest fixtures shared by the API tests."""

import uuid
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.app import app
from src.database.session import get_db
from src.models.enums import UserRole
from src.models.user import User
from src.modules.auth.service import create_access_token


@pytest.fixture
def api_db():
    """Mock AsyncSession injected in place of the request session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def async_client(api_db) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient wired to the FastAPI app with a mock DB session."""

    async def override_get_db():
        yield api_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def _token_for(role: UserRole) -> str:
    user = User(
        id=uuid.uuid4(),
        email=f"{role.value.lower()}@demo.local",
        name=role.value.title(),
        role=role,
    )
    return create_access_token(user)


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {_token_for(UserRole.ADMIN)}"}


@pytest.fixture
def courier_headers() -> dict:
    return {"Authorization": f"Bearer {_token_for(UserRole.COURIER)}"}
