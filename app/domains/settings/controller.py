"""Settings controller endpoints for managing global secrets."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import require_session
from app.database import get_db
from app.domains.settings.service import SettingsService
from app.schemas.base import OkResponse
from app.schemas.settings import GlobalSettingsStatus, GlobalSettingsUpdate

router = APIRouter(
    prefix="/api/settings",
    tags=["Settings"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=GlobalSettingsStatus)
async def get_settings(db: AsyncSession = Depends(get_db)):
    """Report which secrets are configured.

    Only presence flags are returned, never the secret values.
    """
    status = await SettingsService(db).get_status()
    return GlobalSettingsStatus(**status)


@router.post("", response_model=OkResponse)
async def update_settings(update_data: GlobalSettingsUpdate, db: AsyncSession = Depends(get_db)):
    """Store the Gemini API key and/or the automation API key."""
    await SettingsService(db).update_secrets(
        gemini_api_key=update_data.gemini_api_key,
        automation_api_key=update_data.automation_api_key,
    )
    return OkResponse(ok=True)
