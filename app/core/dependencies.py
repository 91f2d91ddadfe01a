# app/core/dependencies.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.database import get_db
from app.domains.auth.service import AuthService
from app.exceptions.base import AuthenticationError
from app.services.blob_storage import LocalBlobStore
from app.services.gemini_gateway import GeminiGateway

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings object the application was created with."""
    return request.app.state.settings


def get_blob_store(request: Request) -> LocalBlobStore:
    return request.app.state.blob_store


def get_generation_gateway(request: Request) -> GeminiGateway:
    return request.app.state.generation_gateway


async def require_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Validate the bearer session token.

    Returns:
        str: The session token

    Raises:
        AuthenticationError: If the token is missing or unknown
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Authentication token is required")

    token = credentials.credentials
    if not await AuthService(db, get_app_settings(request)).is_valid_session(token):
        logger.info("Rejected request with unknown session token")
        raise AuthenticationError("Invalid authentication token")

    return token
