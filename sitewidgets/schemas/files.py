"""
Managed File Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from sitewidgets.models.managed_file import FileStatus


class ManagedFileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uri: str
    url: str
    filename: str
    mime_type: str
    file_size: int
    width: int | None = None
    height: int | None = None
    status: FileStatus
    created_at: datetime


class PromotedAsset(BaseModel):
    """Outcome of a promotion: ``ok`` with fid and url, or ``error`` with message and code"""

    status: str
    fid: int | None = None
    url: str | None = None
    message: str | None = None
    code: int | None = None
