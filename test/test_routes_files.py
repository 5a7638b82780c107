"""
Tests for file uploads, promotion and the temporary file purge
"""

import io
from datetime import datetime, timedelta

from PIL import Image
from utils.mock_utils import create_test_file

from sitewidgets.models.managed_file import FileStatus, ManagedFile
from sitewidgets.services.file_service import FileUrlGenerator, purge_temporary_files

FILES_URL = "/api/v1/files"


def _png_bytes(size=(4, 3)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestFileUrlGenerator:
    def test_public_uri(self):
        generator = FileUrlGenerator(base_url="https://example.com/", prefix="files")
        assert generator.generate("public://cards/a.png") == "https://example.com/files/cards/a.png"

    def test_absolute_url_passes_through(self):
        assert FileUrlGenerator().generate("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"


class TestUpload:
    async def test_upload_image(self, client, admin_headers, upload_dir):
        response = await client.post(
            FILES_URL,
            headers=admin_headers,
            files={"file": ("photo.png", _png_bytes(), "image/png")},
            data={"directory": "executives"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "temporary"
        assert (data["width"], data["height"]) == (4, 3)
        assert data["uri"].startswith("public://executives/")
        assert data["url"].startswith("http://localhost:8000/files/executives/")
        assert (upload_dir / data["uri"][len("public://"):]).exists()

    async def test_rejects_disallowed_type(self, client, admin_headers, upload_dir):
        response = await client.post(
            FILES_URL, headers=admin_headers, files={"file": ("run.sh", b"echo hi", "text/x-shellscript")}
        )
        assert response.status_code == 400

    async def test_rejects_fake_image(self, client, admin_headers, upload_dir):
        response = await client.post(
            FILES_URL, headers=admin_headers, files={"file": ("photo.png", b"not an image", "image/png")}
        )
        assert response.status_code == 400
        assert list(upload_dir.rglob("*.png")) == []

    async def test_upload_requires_admin(self, client, editor_headers, upload_dir):
        response = await client.post(
            FILES_URL, headers=editor_headers, files={"file": ("photo.png", _png_bytes(), "image/png")}
        )
        assert response.status_code == 403


class TestPromote:
    async def test_promote_is_idempotent(self, client, admin_headers, test_db, session_factory):
        managed = await create_test_file(test_db, uri="public://cards/funds.png")

        first = await client.post(f"{FILES_URL}/{managed.id}/promote", headers=admin_headers)
        second = await client.post(f"{FILES_URL}/{managed.id}/promote", headers=admin_headers)

        expected = {
            "status": "ok",
            "fid": managed.id,
            "url": "http://localhost:8000/files/cards/funds.png",
            "message": None,
            "code": None,
        }
        assert first.json() == expected
        assert second.json() == expected
        async with session_factory() as db:
            assert (await db.get(ManagedFile, managed.id)).status == FileStatus.PERMANENT

    async def test_promote_missing_file(self, client, admin_headers):
        response = await client.post(f"{FILES_URL}/999/promote", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "File not found.", "code": 404}

    async def test_get_missing_file(self, client, admin_headers):
        response = await client.get(f"{FILES_URL}/999", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_FILE_NOT_FOUND"


class TestPurge:
    async def test_purges_only_stale_temporary_files(self, test_db, upload_dir):
        now = datetime(2024, 6, 1, 12, 0, 0)
        stale_path = upload_dir / "widgets" / "stale.png"
        stale_path.parent.mkdir(parents=True)
        stale_path.write_bytes(b"x")

        stale = await create_test_file(test_db, "public://widgets/stale.png", created_at=now - timedelta(days=2))
        fresh = await create_test_file(test_db, "public://widgets/fresh.png", created_at=now - timedelta(minutes=5))
        kept = await create_test_file(
            test_db, "public://widgets/kept.png", status=FileStatus.PERMANENT, created_at=now - timedelta(days=2)
        )

        purged = await purge_temporary_files(test_db, max_age_seconds=3600, now=now)

        assert purged == 1
        assert not stale_path.exists()
        assert await test_db.get(ManagedFile, stale.id) is None
        assert await test_db.get(ManagedFile, fresh.id) is not None
        assert await test_db.get(ManagedFile, kept.id) is not None
