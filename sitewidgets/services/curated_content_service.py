"""
Curated Content Service

Newest published items of a fixed set of bundles, for remote consumers.
"""

import enum
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.models.content import Content, ContentStatus
from sitewidgets.schemas.curated import CuratedContentResponse, CuratedItem
from sitewidgets.services.insights_search_service import canonical_url
from sitewidgets.services.settings_service import SettingsService

logger = logging.getLogger(__name__)
api_logger = logging.getLogger("sitewidgets.api")

GENERATED_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class BundleType(str, enum.Enum):
    INSIGHTS = "insights"
    INVESTMENT_STRATEGIES = "investment_strategies"
    REGULATORY_NOTICES = "regulatory_notices"
    EXECUTIVES = "executives"
    MARKET_PERSPECTIVES = "market_perspectives"
    WAYS_TO_INVEST = "ways_to_invest"
    FINANCIAL_EDUCATION = "financial_education"


# Maximum items delivered per bundle, in response order
BUNDLE_LIMITS: dict[BundleType, int] = {
    BundleType.INSIGHTS: 3,
    BundleType.INVESTMENT_STRATEGIES: 2,
    BundleType.REGULATORY_NOTICES: 2,
    BundleType.EXECUTIVES: 4,
    BundleType.MARKET_PERSPECTIVES: 2,
    BundleType.WAYS_TO_INVEST: 2,
    BundleType.FINANCIAL_EDUCATION: 2,
}


class CuratedContentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def latest(self, bundle: BundleType, limit: int) -> list[CuratedItem]:
        stmt = (
            select(Content)
            .where(Content.bundle == bundle.value, Content.status == ContentStatus.PUBLISHED)
            .order_by(Content.created_at.desc(), Content.id.desc())
            .limit(limit)
        )
        contents = (await self.db.execute(stmt)).scalars().all()
        return [
            CuratedItem(
                id=content.uuid,
                title=content.title,
                url=canonical_url(content),
                created=content.created_at.strftime("%Y-%m-%d"),
            )
            for content in contents
        ]

    async def build(self, now: datetime | None = None) -> CuratedContentResponse:
        config = await SettingsService(self.db).get()

        items = {}
        for bundle, limit in BUNDLE_LIMITS.items():
            items[bundle.value] = await self.latest(bundle, limit)

        response = CuratedContentResponse(
            generated=(now or datetime.now(timezone.utc)).strftime(GENERATED_FORMAT),
            endpoint=config.get("api_endpoint"),
            bundles=[bundle.value for bundle in BUNDLE_LIMITS],
            items=items,
        )

        if config.get("enable_logging"):
            api_logger.info(f"Curated content endpoint delivered {len(items)} bundles.")
        return response
