"""
Insights Routes

Public listing endpoint for the insights search widget.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.database import get_db
from sitewidgets.exceptions import ContentTypeNotAvailableError
from sitewidgets.schemas.insights import SearchError, SearchResultEnvelope
from sitewidgets.services.insights_search_service import InsightsSearchService, normalize_search_params

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/search",
    response_model=SearchResultEnvelope,
    responses={404: {"model": SearchError}},
)
async def search_insights(
    q: str | None = Query(None, description="Keyword matched against title and body"),
    limit: str | None = Query(None, description="Page size, 1 to 50 (default 10)"),
    page: str | None = Query(None, description="Zero-based page number"),
    db: AsyncSession = Depends(get_db),
):
    """
    Search published insights, newest first.

    Out-of-range or non-numeric paging values are clamped, never rejected.
    """
    query = normalize_search_params(q, limit, page)

    try:
        envelope, cacheability = await InsightsSearchService(db).search(query)
    except ContentTypeNotAvailableError as e:
        logger.warning(e.message)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": e.message})

    response = JSONResponse(content=envelope.model_dump(mode="json"))
    return cacheability.apply_to(response)
