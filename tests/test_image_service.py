# =============================================================================
# tests/test_image_service.py - Cloudinary Image Tests
# =============================================================================
# The Cloudinary uploader is patched; profile pictures live in FakeSupabase.
#
# Run with: pytest tests/test_image_service.py -v
# =============================================================================

from unittest.mock import patch

import pytest

from app.config import settings
from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    ImageDeleteError,
    ImageNotFoundError,
    ImageUploadError,
    InvalidFileTypeError,
    InvalidPublicIdError,
    ServiceNotConfiguredError,
)
from core.services.image_service import PROFILE_IMAGE_FOLDER, ImageService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _cloudinary_result(public_id="talentflow-uploads/me_abc123"):
    return {
        "public_id": public_id,
        "url": f"http://res.cloudinary.com/test-cloud/image/upload/{public_id}.png",
        "secure_url": f"https://res.cloudinary.com/test-cloud/image/upload/{public_id}.png",
        "width": 200,
        "height": 200,
        "format": "png",
        "resource_type": "image",
        "bytes": len(PNG),
        "created_at": "2025-03-01T10:00:00Z",
    }


@pytest.fixture
def uploader():
    with patch("cloudinary.uploader.upload") as upload, \
            patch("cloudinary.uploader.destroy") as destroy:
        upload.side_effect = lambda content, **options: _cloudinary_result(
            options.get("public_id") or f"{options['folder']}/me_abc123"
        )
        destroy.return_value = {"result": "ok"}
        yield upload, destroy


class TestValidateUpload:
    """Tests for ImageService.validate_upload."""

    def test_accepts_png(self):
        ImageService.validate_upload(PNG, "image/png")

    def test_content_type_is_case_insensitive(self):
        ImageService.validate_upload(PNG, "IMAGE/JPEG")

    def test_empty(self):
        with pytest.raises(EmptyFileError):
            ImageService.validate_upload(b"", "image/png")

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/html", None])
    def test_wrong_type(self, content_type):
        with pytest.raises(InvalidFileTypeError):
            ImageService.validate_upload(PNG, content_type)

    def test_too_large(self):
        with patch.object(settings, "MAX_IMAGE_SIZE_MB", 1):
            with pytest.raises(FileTooLargeError) as exc_info:
                ImageService.validate_upload(b"x" * (1024 * 1024 + 1), "image/png")

        assert exc_info.value.status_code == 413


class TestUpload:
    """Tests for ImageService.upload."""

    def test_uses_default_folder(self, uploader):
        upload, _ = uploader

        result = ImageService.upload(PNG, "me.png", "image/png")

        options = upload.call_args.kwargs
        assert options["folder"] == "talentflow-uploads"
        assert options["filename_override"] == "me.png"
        assert options["overwrite"] is False
        assert result.public_id == "talentflow-uploads/me_abc123"
        assert result.secure_url.startswith("https://")
        assert result.width == 200

    def test_fixed_public_id_overwrites(self, uploader):
        upload, _ = uploader

        result = ImageService.upload(
            PNG, "me.png", "image/png",
            folder="avatars", public_id="avatars/jane", tags=["avatar"],
            transformation=[{"width": 400, "crop": "limit"}],
        )

        options = upload.call_args.kwargs
        assert options["public_id"] == "avatars/jane"
        assert options["overwrite"] is True
        assert options["tags"] == ["avatar"]
        assert options["transformation"] == [{"width": 400, "crop": "limit"}]
        assert result.public_id == "avatars/jane"

    def test_invalid_file_never_reaches_cloudinary(self, uploader):
        upload, _ = uploader

        with pytest.raises(InvalidFileTypeError):
            ImageService.upload(b"%PDF", "cv.pdf", "application/pdf")

        upload.assert_not_called()

    def test_vendor_error(self, uploader):
        upload, _ = uploader
        upload.side_effect = Exception("Invalid image file")

        with pytest.raises(ImageUploadError) as exc_info:
            ImageService.upload(PNG, "me.png", "image/png")

        assert exc_info.value.status_code == 502

    def test_not_configured(self, uploader):
        with patch.object(settings, "CLOUDINARY_API_SECRET", ""):
            with pytest.raises(ServiceNotConfiguredError):
                ImageService.upload(PNG, "me.png", "image/png")


class TestDelete:
    """Tests for ImageService.delete."""

    def test_ok(self, uploader):
        _, destroy = uploader

        assert ImageService.delete("talentflow-uploads/me") == {"success": True, "result": "ok"}
        destroy.assert_called_once_with("talentflow-uploads/me", invalidate=True)

    @pytest.mark.parametrize("public_id", [None, "", 42, "x" * 501])
    def test_invalid_public_id(self, uploader, public_id):
        _, destroy = uploader

        with pytest.raises(InvalidPublicIdError):
            ImageService.delete(public_id)

        destroy.assert_not_called()

    def test_not_found(self, uploader):
        _, destroy = uploader
        destroy.return_value = {"result": "not found"}

        with pytest.raises(ImageNotFoundError):
            ImageService.delete("missing")

    def test_other_result(self, uploader):
        _, destroy = uploader
        destroy.return_value = {"result": "error"}

        with pytest.raises(ImageDeleteError):
            ImageService.delete("talentflow-uploads/me")


class TestProfileImage:
    """Tests for profile picture replacement and removal."""

    def test_first_upload(self, fake_db, professional_id, uploader):
        upload, destroy = uploader

        image = ImageService.set_profile_image(professional_id, PNG, "me.png", "image/png")

        assert upload.call_args.kwargs["folder"] == PROFILE_IMAGE_FOLDER
        assert image.cloudinary_public_id == "profile-pictures/me_abc123"
        row = fake_db.rows("profileimages")[0]
        assert row["uid"] == professional_id
        assert row["src"] == image.src
        destroy.assert_not_called()

    def test_replacing_deletes_previous_asset(self, fake_db, professional_id, uploader):
        _, destroy = uploader
        fake_db.seed("profileimages", {"uid": professional_id, "src": "https://old", "cloudinary_public_id": "old-id"})

        ImageService.set_profile_image(professional_id, PNG, "me.png", "image/png")

        destroy.assert_called_once_with("old-id", invalidate=True)
        rows = fake_db.rows("profileimages")
        assert len(rows) == 1
        assert rows[0]["cloudinary_public_id"] == "profile-pictures/me_abc123"

    def test_missing_previous_asset_is_tolerated(self, fake_db, professional_id, uploader):
        _, destroy = uploader
        destroy.return_value = {"result": "not found"}
        fake_db.seed("profileimages", {"uid": professional_id, "src": "https://old", "cloudinary_public_id": "old-id"})

        image = ImageService.set_profile_image(professional_id, PNG, "me.png", "image/png")

        assert image.cloudinary_public_id == "profile-pictures/me_abc123"

    def test_database_failure_removes_new_asset(self, fake_db, professional_id, uploader):
        upload, destroy = uploader
        fake_db.failing_tables.add("profileimages")

        with patch.object(ImageService, "get_profile_image", return_value=None):
            with pytest.raises(Exception, match="simulated failure"):
                ImageService.set_profile_image(professional_id, PNG, "me.png", "image/png")

        upload.assert_called_once()
        destroy.assert_called_once_with("profile-pictures/me_abc123", invalidate=True)

    def test_delete_profile_image(self, fake_db, professional_id, uploader):
        _, destroy = uploader
        fake_db.seed("profileimages", {"uid": professional_id, "src": "https://old", "cloudinary_public_id": "old-id"})

        ImageService.delete_profile_image(professional_id)

        destroy.assert_called_once_with("old-id", invalidate=True)
        assert fake_db.rows("profileimages") == []

    def test_delete_without_picture(self, fake_db, professional_id, uploader):
        with pytest.raises(ImageNotFoundError):
            ImageService.delete_profile_image(professional_id)
