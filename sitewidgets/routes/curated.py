import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.database import get_db
from sitewidgets.schemas.curated import CuratedContentResponse
from sitewidgets.services.curated_content_service import CuratedContentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CuratedContentResponse)
async def curated_content(db: AsyncSession = Depends(get_db)):
    """Newest published items of every curated bundle."""
    return await CuratedContentService(db).build()
