"""Login — password check and token issuance."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from src.config import settings
from src.exceptions import UnauthorizedException
from src.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user: User, expires_minutes: int | None = None) -> str:
    """Sign a JWT carrying the claims ``get_current_user`` expects."""
    expires = datetime.now(UTC) + timedelta(
        minutes=expires_minutes or settings.jwt_expiry_minutes
    )
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "name": user.name,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate(self, email: str, password: str) -> User:
        """Return the active user matching the credentials."""
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        user = result.scalar_one_or_none()
        if user is None or not user.is_active or not verify_password(user.password_hash, password):
            logger.info("Failed login for %s", email)
            raise UnauthorizedException("Invalid email or password")
        logger.info("User %s logged in as %s", user.id, user.role.value)
        return user
