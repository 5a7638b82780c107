"""
Insights Search Schemas

Pydantic models for the insights listing envelope.
"""

from pydantic import BaseModel, Field


class SearchQuery(BaseModel):
    """Normalized search parameters"""

    keyword: str = ""
    limit: int = Field(10, ge=1, le=50)
    page: int = Field(0, ge=0)

    @property
    def offset(self) -> int:
        return self.page * self.limit


class ThemeRef(BaseModel):
    id: int | None = None
    label: str = ""


class ContentItem(BaseModel):
    """One listed insight"""

    id: int
    title: str
    summary: str
    author: str
    created: str = Field(..., description="ISO-8601 publication timestamp")
    url: str
    theme: ThemeRef
    read_time: str


class SearchMeta(BaseModel):
    query: str
    limit: int
    page: int
    total: int
    pages: int


class SearchResultEnvelope(BaseModel):
    meta: SearchMeta
    data: list[ContentItem]


class SearchError(BaseModel):
    error: str
