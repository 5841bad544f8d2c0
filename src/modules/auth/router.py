"""Authentication API router — login and current user."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database.session import get_db
from src.middleware.rate_limit import limiter
from src.modules.auth.dependencies import AuthenticatedUser, get_current_user
from src.modules.auth.schemas import CurrentUserResponse, LoginRequest, TokenResponse
from src.modules.auth.service import AuthService, create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange email and password for a bearer token."""
    svc = AuthService(db)
    user = await svc.authenticate(body.email, body.password)
    return TokenResponse(
        access_token=create_access_token(user),
        expires_in=settings.jwt_expiry_minutes * 60,
        role=user.role,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: AuthenticatedUser = Depends(get_current_user)):
    """Claims of the calling user."""
    return CurrentUserResponse(id=user.id, email=user.email, name=user.name, role=user.role)
