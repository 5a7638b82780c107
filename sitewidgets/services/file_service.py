"""
File Service

Stores widget uploads as temporary managed files, resolves ``public://``
URIs to public URLs and purges temporary files that were never promoted.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi import HTTPException, UploadFile, status
from PIL import Image, UnidentifiedImageError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.config import settings
from sitewidgets.exceptions import ManagedFileNotFoundError
from sitewidgets.models.managed_file import FileStatus, ManagedFile
from sitewidgets.utils.sanitize import sanitize_filename

logger = logging.getLogger(__name__)

PUBLIC_SCHEME = "public://"
UPLOAD_DIR = Path(settings.upload_dir)
MAX_FILE_SIZE = settings.media_max_file_size

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
    "image/gif": [".gif"],
    "image/webp": [".webp"],
}

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf": [".pdf"],
}

ALLOWED_MIME_TYPES = {**ALLOWED_IMAGE_TYPES, **ALLOWED_DOCUMENT_TYPES}


def local_path(uri: str) -> Path:
    """Map a ``public://`` URI onto the upload directory."""
    return UPLOAD_DIR / uri[len(PUBLIC_SCHEME):]


class FileUrlGenerator:
    """Turns stream-wrapper URIs into absolute public URLs."""

    def __init__(self, base_url: str | None = None, prefix: str | None = None):
        self.base_url = (base_url if base_url is not None else settings.public_base_url).rstrip("/")
        self.prefix = "/" + (prefix if prefix is not None else settings.files_url_prefix).strip("/")

    def generate(self, uri: str) -> str:
        if uri.startswith(PUBLIC_SCHEME):
            return f"{self.base_url}{self.prefix}/{uri[len(PUBLIC_SCHEME):]}"
        if uri.startswith(("http://", "https://")):
            return uri
        raise ValueError(f"Unsupported file URI: {uri}")


class DatabaseFileStorage:
    """Loads and saves managed file records on an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load(self, fid: int) -> ManagedFile | None:
        return await self.db.get(ManagedFile, fid)

    async def save(self, file: ManagedFile) -> None:
        # Flushed only: the caller owns the transaction
        self.db.add(file)
        await self.db.flush()


class FileService:
    """Upload handling for widget images and documents"""

    def __init__(self, db: AsyncSession, upload_dir: Path | None = None):
        self.db = db
        self.upload_dir = upload_dir or UPLOAD_DIR

    @staticmethod
    def validate_file(file: UploadFile) -> str:
        """
        Validate the MIME type and extension of an upload.

        Returns:
            The validated MIME type

        Raises:
            HTTPException: If the file is missing or of a disallowed type
        """
        if not file.filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

        mime_type = file.content_type
        if not mime_type or mime_type not in ALLOWED_MIME_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File type not allowed. Allowed types: {', '.join(ALLOWED_MIME_TYPES.keys())}",
            )

        file_ext = Path(file.filename).suffix.lower()
        if file_ext not in ALLOWED_MIME_TYPES[mime_type]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File extension {file_ext} does not match MIME type {mime_type}",
            )

        return mime_type

    @staticmethod
    def generate_unique_filename(original_filename: str) -> str:
        file_ext = Path(original_filename).suffix.lower()
        return f"{uuid.uuid4()}{file_ext}"

    async def _write(self, file: UploadFile, path: Path) -> int:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_size = 0
        with path.open("wb") as buffer:
            while chunk := await file.read(8192):
                file_size += len(chunk)
                if file_size > MAX_FILE_SIZE:
                    buffer.close()
                    path.unlink()
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=f"File size exceeds maximum allowed size of {MAX_FILE_SIZE // (1024 * 1024)}MB",
                    )
                buffer.write(chunk)
        return file_size

    @staticmethod
    def _image_dimensions(path: Path) -> tuple[int, int]:
        try:
            with Image.open(path) as img:
                img.verify()
            with Image.open(path) as img:
                return img.size
        except (UnidentifiedImageError, OSError) as e:
            path.unlink(missing_ok=True)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is not a valid image") from e

    async def upload(self, file: UploadFile, directory: str = "widgets") -> ManagedFile:
        """
        Store an upload as a temporary managed file.

        The file stays temporary until a saved block configuration promotes it.
        """
        mime_type = self.validate_file(file)
        directory = sanitize_filename(directory.strip("/")) or "widgets"
        relative = f"{directory}/{self.generate_unique_filename(file.filename)}"
        path = self.upload_dir / relative

        file_size = await self._write(file, path)

        width = height = None
        if mime_type in ALLOWED_IMAGE_TYPES:
            width, height = self._image_dimensions(path)

        managed = ManagedFile(
            uri=f"{PUBLIC_SCHEME}{relative}",
            filename=sanitize_filename(file.filename),
            mime_type=mime_type,
            file_size=file_size,
            width=width,
            height=height,
            status=FileStatus.TEMPORARY,
        )
        self.db.add(managed)
        await self.db.commit()
        await self.db.refresh(managed)

        logger.info(f"Stored temporary file {managed.id} at {managed.uri}", extra={"fid": managed.id})
        return managed

    async def get(self, fid: int) -> ManagedFile:
        managed = await self.db.get(ManagedFile, fid)
        if managed is None:
            raise ManagedFileNotFoundError(fid)
        return managed


async def purge_temporary_files(db: AsyncSession, max_age_seconds: int | None = None, now: datetime | None = None) -> int:
    """
    Delete temporary files older than ``max_age_seconds`` from disk and database.

    Returns:
        Number of purged files
    """
    max_age = max_age_seconds if max_age_seconds is not None else settings.temporary_file_max_age_seconds
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=max_age)
    # Stored datetimes are naive UTC
    cutoff = cutoff.replace(tzinfo=None)

    result = await db.execute(
        select(ManagedFile).where(ManagedFile.status == FileStatus.TEMPORARY, ManagedFile.created_at < cutoff)
    )
    stale = result.scalars().all()

    for managed in stale:
        if managed.uri.startswith(PUBLIC_SCHEME):
            local_path(managed.uri).unlink(missing_ok=True)
        await db.delete(managed)

    await db.commit()
    if stale:
        logger.info(f"Purged {len(stale)} temporary files")
    return len(stale)
