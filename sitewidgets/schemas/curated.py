"""
Curated Content Schemas
"""

from pydantic import BaseModel


class CuratedItem(BaseModel):
    id: str
    title: str
    url: str
    created: str


class CuratedContentResponse(BaseModel):
    generated: str
    endpoint: str | None = None
    bundles: list[str]
    items: dict[str, list[CuratedItem]]
