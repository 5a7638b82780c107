"""
File Routes

Upload of widget assets and explicit promotion of temporary files.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.auth import require_admin
from sitewidgets.database import get_db
from sitewidgets.models.managed_file import ManagedFile
from sitewidgets.schemas.files import ManagedFileResponse, PromotedAsset
from sitewidgets.services.asset_promoter import AssetPromoter, is_ok
from sitewidgets.services.file_service import DatabaseFileStorage, FileService, FileUrlGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def _file_response(managed: ManagedFile) -> ManagedFileResponse:
    return ManagedFileResponse(
        id=managed.id,
        uri=managed.uri,
        url=FileUrlGenerator().generate(managed.uri),
        filename=managed.filename,
        mime_type=managed.mime_type,
        file_size=managed.file_size,
        width=managed.width,
        height=managed.height,
        status=managed.status,
        created_at=managed.created_at,
    )


@router.post("", response_model=ManagedFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    directory: str = Form("widgets"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Store an upload as a temporary file. It is kept only if promoted."""
    managed = await FileService(db).upload(file, directory=directory)
    return _file_response(managed)


@router.get("/{fid}", response_model=ManagedFileResponse)
async def get_file(
    fid: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    return _file_response(await FileService(db).get(fid))


@router.post("/{fid}/promote", response_model=PromotedAsset)
async def promote_file(
    fid: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Make a file permanent and return its public URL.

    Failures come back as ``{"status": "error", "message", "code"}`` with
    ``code`` also used as the HTTP status.
    """
    result = await AssetPromoter(DatabaseFileStorage(db)).promote(fid)
    if not is_ok(result):
        await db.rollback()
        return JSONResponse(status_code=result["code"], content=result)

    await db.commit()
    return result
