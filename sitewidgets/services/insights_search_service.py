"""
Insights Search Service

Paginated keyword search over published insights. Optional fields are read
through fixed fallback chains that older content still relies on:

    summary:   field_summary, field_resumen, field_short_description, then body
    theme:     field_theme, field_tema
    read time: field_read_time, field_tiempo_de_lectura
"""

import logging
import math
from datetime import timezone
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.config import settings
from sitewidgets.exceptions import ContentTypeNotAvailableError
from sitewidgets.models.content import Content, ContentStatus
from sitewidgets.models.content_type import ContentType
from sitewidgets.models.taxonomy import TaxonomyTerm
from sitewidgets.schemas.insights import ContentItem, SearchMeta, SearchQuery, SearchResultEnvelope, ThemeRef
from sitewidgets.utils.cacheability import CacheableMetadata
from sitewidgets.utils.sanitize import strip_markup

logger = logging.getLogger(__name__)

INSIGHTS_BUNDLE = "insights"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
BODY_SUMMARY_LENGTH = 300

SUMMARY_FIELDS = ("field_summary", "field_resumen", "field_short_description")
THEME_FIELDS = ("field_theme", "field_tema")
READ_TIME_FIELDS = ("field_read_time", "field_tiempo_de_lectura")


def _as_int(value: Any, default: int) -> int:
    """Integer part of a numeric value or string ("5.0" -> 5); ``default`` otherwise."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def normalize_search_params(q: Any = None, limit: Any = None, page: Any = None) -> SearchQuery:
    """
    Turn raw query-string values into a SearchQuery.

    Nothing is rejected: non-numeric values fall back to their defaults and
    numbers are clamped into range.
    """
    keyword = str(q).strip() if q is not None else ""
    limit_value = max(1, min(MAX_PAGE_SIZE, _as_int(limit, DEFAULT_PAGE_SIZE)))
    page_value = max(0, _as_int(page, 0))
    return SearchQuery(keyword=keyword, limit=limit_value, page=page_value)


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def _field_text(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("value")
    return str(value) if value not in (None, "") else ""


def extract_summary(content: Content) -> str:
    for field_name in SUMMARY_FIELDS:
        text = strip_markup(_field_text(content.field_value(field_name)))
        if text:
            return text

    if content.body_summary:
        return strip_markup(content.body_summary)
    if content.body:
        return strip_markup(content.body)[:BODY_SUMMARY_LENGTH].strip()
    return ""


def theme_term_ids(content: Content) -> list[int]:
    """Referenced taxonomy term ids in fallback order, without checking that they exist."""
    term_ids = []
    for field_name in THEME_FIELDS:
        value = content.field_value(field_name)
        if isinstance(value, dict):
            value = value.get("target_id", value.get("id"))
        if value in (None, "") or isinstance(value, bool):
            continue
        try:
            term_ids.append(int(value))
        except (TypeError, ValueError):
            continue
    return term_ids


def extract_theme(content: Content, terms: dict[int, TaxonomyTerm]) -> ThemeRef:
    """First theme field whose term still exists; otherwise an empty theme."""
    for term_id in theme_term_ids(content):
        term = terms.get(term_id)
        if term is not None:
            return ThemeRef(id=term.id, label=term.name)
    return ThemeRef(id=None, label="")


def extract_read_time(content: Content) -> str:
    for field_name in READ_TIME_FIELDS:
        text = _field_text(content.field_value(field_name)).strip()
        if text:
            return text
    return ""


def format_created(content: Content) -> str:
    created = content.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.isoformat(timespec="seconds")


def canonical_url(content: Content) -> str:
    return f"{settings.public_base_url.rstrip('/')}{content.path}"


class InsightsSearchService:
    """Service for the insights listing endpoint"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _body_searchable(self) -> bool:
        content_type = await self.db.get(ContentType, INSIGHTS_BUNDLE)
        if content_type is None:
            raise ContentTypeNotAvailableError(INSIGHTS_BUNDLE)
        return content_type.has_field("body")

    async def _load_terms(self, contents: list[Content]) -> dict[int, TaxonomyTerm]:
        term_ids = {term_id for content in contents for term_id in theme_term_ids(content)}
        if not term_ids:
            return {}
        result = await self.db.execute(select(TaxonomyTerm).where(TaxonomyTerm.id.in_(term_ids)))
        return {term.id: term for term in result.scalars().all()}

    async def search(self, query: SearchQuery) -> tuple[SearchResultEnvelope, CacheableMetadata]:
        """
        Run a search.

        Returns:
            The result envelope and the cache metadata of everything it used

        Raises:
            ContentTypeNotAvailableError: If the insights content type is missing
        """
        body_searchable = await self._body_searchable()

        stmt = select(Content).where(
            Content.bundle == INSIGHTS_BUNDLE,
            Content.status == ContentStatus.PUBLISHED,
        )

        if query.keyword:
            needle = query.keyword.lower()
            conditions = [func.lower(Content.title).contains(needle, autoescape=True)]
            if body_searchable:
                conditions.append(func.lower(Content.body).contains(needle, autoescape=True))
            stmt = stmt.where(or_(*conditions))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = stmt.order_by(Content.created_at.desc(), Content.id.desc()).offset(query.offset).limit(query.limit)
        contents = list((await self.db.execute(stmt)).scalars().all())
        terms = await self._load_terms(contents)

        cacheability = (
            CacheableMetadata()
            .set_max_age(settings.search_cache_max_age)
            .add_contexts("url.query_args:q", "url.query_args:limit", "url.query_args:page")
            .add_tags("content_list", f"content:{INSIGHTS_BUNDLE}")
        )

        items = []
        for content in contents:
            theme = extract_theme(content, terms)
            cacheability.add_tags(f"content:{content.id}")
            if theme.id is not None:
                cacheability.add_tags(f"taxonomy_term:{theme.id}")
            items.append(
                ContentItem(
                    id=content.id,
                    title=content.title,
                    summary=extract_summary(content),
                    author=content.author.label if content.author else "",
                    created=format_created(content),
                    url=canonical_url(content),
                    theme=theme,
                    read_time=extract_read_time(content),
                )
            )

        envelope = SearchResultEnvelope(
            meta=SearchMeta(
                query=query.keyword,
                limit=query.limit,
                page=query.page,
                total=total,
                pages=page_count(total, query.limit),
            ),
            data=items,
        )
        logger.debug(f"Insights search '{query.keyword}' matched {total} items")
        return envelope, cacheability
