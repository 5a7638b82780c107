"""
Asset Promotion

Uploaded files begin life as temporary records. Saving a configuration that
references one promotes it to permanent and swaps the file id for a public
URL. Failures are returned as structured results instead of being raised.
"""

import logging
from typing import Any, Protocol

from sitewidgets.models.managed_file import ManagedFile
from sitewidgets.services.file_service import FileUrlGenerator

logger = logging.getLogger(__name__)

FILE_NOT_FOUND = "File not found."
UNABLE_TO_PERSIST = "Unable to persist file."


class FileStorage(Protocol):
    async def load(self, fid: int) -> ManagedFile | None: ...

    async def save(self, file: ManagedFile) -> None: ...


def _as_fid(value: Any) -> int:
    """Numeric strings and ints become fids; anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return 0
    return 0


def _as_text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def is_ok(result: dict[str, Any]) -> bool:
    return result.get("status") == "ok"


class AssetPromoter:
    def __init__(self, storage: FileStorage, url_generator: FileUrlGenerator | None = None):
        self.storage = storage
        self.url_generator = url_generator or FileUrlGenerator()

    async def promote(self, fid: Any) -> dict[str, Any]:
        """
        Mark one file permanent and resolve its public URL.

        Returns ``{"status": "ok", "fid", "url"}`` or
        ``{"status": "error", "message", "code"}``. Promoting an already
        permanent file skips the write and yields the same URL.
        """
        file_id = _as_fid(fid)
        managed = await self.storage.load(file_id) if file_id > 0 else None
        if managed is None:
            return {"status": "error", "message": FILE_NOT_FOUND, "code": 404}

        try:
            if not managed.is_permanent:
                managed.set_permanent()
                await self.storage.save(managed)
                logger.info(f"Promoted file {managed.id} to permanent", extra={"fid": managed.id})
            url = self.url_generator.generate(managed.uri)
        except Exception as e:
            logger.error(f"Failed to promote file {file_id}: {e}", extra={"fid": file_id})
            return {"status": "error", "message": UNABLE_TO_PERSIST, "code": 500}

        return {"status": "ok", "fid": int(managed.id), "url": url}

    async def promote_row(self, row: dict[str, Any]) -> dict[str, Any]:
        """
        Promote the desktop/mobile image pair of a row.

        Both slots end up populated: an identical fid is promoted once and
        mirrored, a missing slot mirrors the other one, and a legacy
        ``image_url`` fills empty slots. The first failed promotion is
        returned as is.
        """
        image_fid = _as_fid(row.get("image_fid"))
        mobile_fid = _as_fid(row.get("mobile_image_fid"))
        desktop_img = _as_text(row.get("desktop_img"))
        mobile_img = _as_text(row.get("mobile_img"))
        image_url = _as_text(row.get("image_url"))

        if not desktop_img and image_url:
            desktop_img = image_url
        if not mobile_img and image_url:
            mobile_img = image_url

        if image_fid <= 0 and mobile_fid <= 0:
            fallback = desktop_img or mobile_img or image_url
            return {
                "status": "ok",
                "image_fid": None,
                "mobile_image_fid": None,
                "desktop_img": desktop_img or fallback,
                "mobile_img": mobile_img or fallback,
                "image_url": image_url or fallback,
            }

        desktop = None
        if image_fid > 0:
            desktop = await self.promote(image_fid)
            if not is_ok(desktop):
                return desktop
            desktop_img = desktop["url"]
            image_fid = desktop["fid"]

        if mobile_fid > 0:
            if desktop is not None and mobile_fid == desktop["fid"]:
                mobile_img = desktop_img
                mobile_fid = image_fid
            else:
                mobile = await self.promote(mobile_fid)
                if not is_ok(mobile):
                    return mobile
                mobile_img = mobile["url"]
                mobile_fid = mobile["fid"]

        if not desktop_img and mobile_img:
            desktop_img = mobile_img
        if not mobile_img and desktop_img:
            mobile_img = desktop_img
        if not image_url:
            image_url = desktop_img or mobile_img

        return {
            "status": "ok",
            "image_fid": image_fid if image_fid > 0 else (mobile_fid if mobile_fid > 0 else None),
            "mobile_image_fid": mobile_fid if mobile_fid > 0 else None,
            "desktop_img": desktop_img,
            "mobile_img": mobile_img,
            "image_url": image_url,
        }
