"""
Settings Routes

Admin endpoints for the suite settings.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.auth import require_admin
from sitewidgets.database import get_db
from sitewidgets.schemas.settings import SuiteSettingsResponse, SuiteSettingsUpdate
from sitewidgets.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SuiteSettingsResponse)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    return await SettingsService(db).get_public()


@router.put("", response_model=SuiteSettingsResponse)
async def update_settings(
    payload: SuiteSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Store new suite settings. An empty secret token keeps the stored one."""
    result = await SettingsService(db).update(payload)
    logger.info(f"Suite settings updated by {admin.get('sub')}")
    return result
