"""S3-backed implementation of ImageStorageRepository."""

from collections.abc import Iterator
from urllib.parse import quote

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from core.models.errors import BackendReadError, BackendWriteError
from core.models.image import StoredObject
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import S3_KEY_PREFIX, S3_OBJECT_ACL, STORAGE_S3
from core.utils.time import to_utc

logger = Logger(UTC=True)


class S3ImageStorage(ImageStorageRepository):
    """Image storage backed by Amazon S3.

    Originals and thumbnails share the ``images/`` prefix of one bucket and
    are written with a public-read ACL.
    """

    name = STORAGE_S3

    def __init__(self, adapter: S3AdapterProtocol) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter

    @staticmethod
    def object_key(key: str) -> str:
        return f"{S3_KEY_PREFIX}{key}"

    def put(
        self,
        *,
        key: str,
        data: bytes,
        media_type: str,
        base_url: str | None = None,
    ) -> str:
        """Upload bytes to S3 and return the object URL."""
        object_key = self.object_key(key)

        logger.debug(
            "Uploading object",
            extra={"key": object_key, "size": len(data), "media_type": media_type},
        )

        try:
            self._s3.put_object(
                key=object_key,
                body=data,
                content_type=media_type,
                acl=S3_OBJECT_ACL,
            )
        except ClientError as exc:
            logger.error(
                "S3 upload failed",
                extra={"key": object_key, "error_code": exc.response.get("Error", {}).get("Code")},
            )
            raise BackendWriteError(
                message="Unable to store image at this time",
                details={"file": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading object")
            raise BackendWriteError(
                message="Unable to store image at this time",
                details={"file": key},
            ) from exc

        logger.info("Object uploaded successfully", extra={"key": object_key})
        return self.url_for(key)

    def list_objects(self) -> Iterator[StoredObject]:
        """Yield every object under the images prefix."""
        logger.debug("Listing objects", extra={"prefix": S3_KEY_PREFIX})

        try:
            for summary in self._s3.iter_objects(prefix=S3_KEY_PREFIX):
                object_key = summary["Key"]
                if object_key.endswith("/"):
                    continue

                yield StoredObject(
                    name=object_key[len(S3_KEY_PREFIX):],
                    size_bytes=int(summary.get("Size", 0)),
                    last_modified=to_utc(summary["LastModified"]),
                )

        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed", extra={"prefix": S3_KEY_PREFIX})
            raise BackendReadError(message="Unable to list images at this time") from exc

        except Exception as exc:
            logger.exception("Unexpected error listing objects")
            raise BackendReadError(message="Unable to list images at this time") from exc

    def delete(self, *, key: str) -> bool:
        """Delete an object. S3 deletes are idempotent, so absence is not reported."""
        object_key = self.object_key(key)
        logger.debug("Deleting object", extra={"key": object_key})

        try:
            self._s3.delete_object(key=object_key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in {"NoSuchKey", "404"}:
                logger.info("Object already absent", extra={"key": object_key})
                return False

            logger.error("S3 deletion failed", extra={"key": object_key})
            raise BackendReadError(
                message="Unable to delete image at this time",
                details={"file": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting object")
            raise BackendReadError(
                message="Unable to delete image at this time",
                details={"file": key},
            ) from exc

        logger.info("Object deleted successfully", extra={"key": object_key})
        return True

    def url_for(self, key: str, *, base_url: str | None = None) -> str:
        """Return the canonical object URL; ``base_url`` does not apply to S3."""
        quoted = quote(self.object_key(key))

        if self._s3.endpoint_url:
            return f"{self._s3.endpoint_url}/{self._s3.bucket}/{quoted}"

        return f"https://{self._s3.bucket}.s3.{self._s3.region}.amazonaws.com/{quoted}"
