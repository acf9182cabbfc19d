"""Selects the storage backend for the lifetime of the process."""

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.local.local_image_storage import LocalImageStorage
from core.models.settings import ServiceSettings
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import STORAGE_S3

logger = Logger(UTC=True)


def build_storage(settings: ServiceSettings) -> ImageStorageRepository:
    """Construct the storage backend named by ``settings.storage``."""
    if settings.storage == STORAGE_S3:
        logger.info(
            "Using S3 storage",
            extra={"bucket": settings.aws_bucket, "region": settings.aws_region},
        )
        return S3ImageStorage(S3Adapter(settings))

    logger.info("Using local storage", extra={"root": settings.upload_dir})
    return LocalImageStorage(
        settings.upload_dir,
        public_mount=settings.public_mount,
        base_url=settings.base_url,
    )
