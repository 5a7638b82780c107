"""
Block Schemas

Pydantic models for block placement and the row editor API.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlockCreate(BaseModel):
    plugin_id: str = Field(..., description="Widget type, e.g. 'map_pins'")
    label: str = ""
    settings: dict[str, Any] = Field(default_factory=dict)


class BlockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    plugin_id: str
    label: str
    settings: dict[str, Any]
    created_at: datetime
    updated_at: datetime | None = None


class BlockRender(BaseModel):
    id: int
    plugin_id: str
    context: dict[str, Any]


class EditSessionOpen(BaseModel):
    """Open (or resume) an editing session"""

    session_id: str | None = None
    parent_session_id: str | None = Field(None, description="Session of the enclosing editing surface")
    rows: list[dict[str, Any]] | None = Field(None, description="Rows submitted by the client, if any")


class RowsSubmission(BaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)


class SaveSubmission(BaseModel):
    rows: list[dict[str, Any]] | None = None
    settings: dict[str, Any] = Field(default_factory=dict)


class WorkingCopyResponse(BaseModel):
    session_id: str
    block_id: int
    parent_session_id: str | None = None
    status: str
    rows: list[dict[str, Any]]
    max_rows: int | None = None
