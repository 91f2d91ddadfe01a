"""Authentication endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.dependencies import get_app_settings, require_session
from app.database import get_db
from app.domains.auth.service import AuthService
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.base import OkResponse

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/check", response_model=OkResponse, dependencies=[Depends(require_session)])
async def check_session():
    """Confirm that the presented bearer token is a live session."""
    return OkResponse(ok=True)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Exchange the operator password for a session token."""
    token = await AuthService(db, settings).login(body.password)
    return TokenResponse(token=token)
