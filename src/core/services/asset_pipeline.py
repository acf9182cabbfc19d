"""Business logic for image ingestion, listing and deletion.

This module coordinates validation, naming, thumbnail derivation and
storage for uploads, and pairs originals with thumbnails for list and
delete using the shared naming rule.
"""

import hmac
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import (
    BackendWriteError,
    ForbiddenError,
    PayloadTooLargeError,
    ValidationError,
)
from core.models.image import AssetListingEntry, StoredObject, UploadedAsset
from core.models.settings import ServiceSettings
from core.processing.thumbnail import ThumbnailGenerator
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import format_file_size
from core.utils.mime import extension_for, validate_media_type
from core.utils.naming import (
    generate_file_name,
    is_thumbnail_name,
    original_name_for,
    thumbnail_name_for,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class AssetPipeline:
    """Application service behind the upload, list and delete operations.

    The pipeline holds no per-request state; the storage backend is the
    only shared mutable resource, so one instance serves concurrent calls.
    """

    def __init__(
        self,
        *,
        settings: ServiceSettings,
        storage: ImageStorageRepository,
        thumbnails: ThumbnailGenerator | None = None,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.thumbnails = thumbnails or ThumbnailGenerator()

    def upload(
        self,
        *,
        file_data: bytes,
        declared_type: str | None = None,
        max_size: int | None = None,
        base_url: str | None = None,
    ) -> UploadedAsset:
        """Validate, name, thumbnail and persist an uploaded image.

        The upload flow is:
        1. Reject oversized or empty payloads
        2. Sniff and validate the media type
        3. Generate the original and thumbnail names
        4. Derive the thumbnail
        5. Store the original, then the thumbnail
        6. Remove the original if the thumbnail write fails

        Args:
            file_data: Raw uploaded bytes
            declared_type: Client-supplied Content-Type, used only when
                sniffing is inconclusive
            max_size: Size limit in bytes; defaults to the configured limit
            base_url: Public base URL derived from the request

        Returns:
            Public metadata of the stored asset

        Raises:
            PayloadTooLargeError: If the payload exceeds the size limit
            ValidationError: If the payload is empty
            UnsupportedMediaTypeError: If the content is not an allowed image
            ThumbnailGenerationError: If the image cannot be processed
            BackendWriteError: If either write fails
        """
        limit = max_size if max_size is not None else self.settings.max_file_size
        size = len(file_data)

        # Step 1: Size checks happen before any processing or I/O
        if size > limit:
            logger.warning("Upload exceeds size limit", extra={"size": size, "limit": limit})
            raise PayloadTooLargeError(
                message=f"File size exceeds {format_file_size(limit)} limit",
                details={"size": size, "max_size": limit},
            )

        if size == 0:
            raise ValidationError(message="No file uploaded")

        # Step 2: Trust content, not client metadata
        media_type = validate_media_type(file_data, declared_type)

        # Step 3: Names
        file_name = generate_file_name(extension_for(media_type))
        thumbnail_name = thumbnail_name_for(file_name)

        logger.debug(
            "Starting image upload",
            extra={"file": file_name, "media_type": media_type, "size": size},
        )

        # Step 4: Thumbnail is derived before anything is written
        thumbnail_data = self.thumbnails.create_thumbnail(file_data, media_type)
        created_at = utc_now_iso()

        # Step 5: Original first, then thumbnail
        url = self.storage.put(
            key=file_name,
            data=file_data,
            media_type=media_type,
            base_url=base_url,
        )

        try:
            thumbnail_url = self.storage.put(
                key=thumbnail_name,
                data=thumbnail_data,
                media_type=media_type,
                base_url=base_url,
            )
        except BackendWriteError:
            logger.exception("Thumbnail write failed", extra={"file": file_name})

            # Step 6: Best-effort cleanup to avoid an orphaned original
            try:
                self.storage.delete(key=file_name)
            except Exception:
                logger.warning(
                    "Failed to clean up original after thumbnail write failure",
                    extra={"file": file_name},
                )

            raise

        logger.info(
            "Image uploaded successfully",
            extra={"file": file_name, "media_type": media_type, "size": size},
        )

        return UploadedAsset(
            id=file_name,
            file=file_name,
            thumbnail_file=thumbnail_name,
            url=url,
            thumbnail_url=thumbnail_url,
            media_type=media_type,
            size_bytes=size,
            created_at=created_at,
        )

    def list_assets(self, *, base_url: str | None = None) -> list[AssetListingEntry]:
        """List stored originals, most recent first.

        Thumbnail URLs are derived from the naming rule. With
        ``verify_thumbnails`` enabled, an original whose thumbnail is absent
        from the same enumeration is reported with ``thumbnail_url=None``.

        Raises:
            BackendReadError: If the backend enumeration fails
        """
        logger.debug("Listing assets")

        originals: list[StoredObject] = []
        thumbnails: set[str] = set()

        for stored in self.storage.list_objects():
            if is_thumbnail_name(stored.name):
                thumbnails.add(stored.name)
            else:
                originals.append(stored)

        originals.sort(key=lambda item: (item.last_modified, item.name), reverse=True)

        entries: list[AssetListingEntry] = []
        for stored in originals:
            thumbnail_name = thumbnail_name_for(stored.name)
            thumbnail_url: str | None = self.storage.url_for(thumbnail_name, base_url=base_url)

            if self.settings.verify_thumbnails and thumbnail_name not in thumbnails:
                logger.warning("Thumbnail missing for original", extra={"file": stored.name})
                thumbnail_url = None

            entries.append(
                AssetListingEntry(
                    file=stored.name,
                    url=self.storage.url_for(stored.name, base_url=base_url),
                    thumbnail_url=thumbnail_url,
                    size_bytes=stored.size_bytes,
                    date=stored.last_modified.isoformat(),
                )
            )

        logger.info("Assets listed successfully", extra={"count": len(entries)})
        return entries

    def delete(self, *, file_name: str, supplied_key: str | None = None) -> dict[str, Any]:
        """Delete an original and its thumbnail.

        Deleting an asset that is already gone succeeds. Thumbnails are
        not assets and cannot be deleted on their own.

        Args:
            file_name: File name of the original (the asset id)
            supplied_key: Caller-supplied admin key

        Returns:
            A dictionary containing deletion confirmation details

        Raises:
            ForbiddenError: If an admin key is configured and does not match
            ValidationError: If ``file_name`` names a thumbnail
            BackendReadError: If the backend fails to delete
        """
        admin_key = self.settings.admin_key
        if admin_key and not hmac.compare_digest(
            (supplied_key or "").encode(),
            admin_key.encode(),
        ):
            logger.warning("Delete rejected: admin key mismatch", extra={"file": file_name})
            raise ForbiddenError(message="forbidden")

        if is_thumbnail_name(file_name):
            logger.warning("Delete rejected: thumbnail name", extra={"file": file_name})
            raise ValidationError(
                message="Invalid file name",
                details={"file": file_name, "original": original_name_for(file_name)},
            )

        logger.debug("Starting asset deletion", extra={"file": file_name})

        thumbnail_name = thumbnail_name_for(file_name)
        removed_original = self.storage.delete(key=file_name)
        removed_thumbnail = self.storage.delete(key=thumbnail_name)

        logger.info(
            "Asset deleted successfully",
            extra={
                "file": file_name,
                "removed_original": removed_original,
                "removed_thumbnail": removed_thumbnail,
            },
        )

        return {
            "ok": True,
            "file": file_name,
            "deleted_at": utc_now_iso(),
        }
