"""Filesystem-backed implementation of ImageStorageRepository."""

from collections.abc import Iterator
from pathlib import Path
from urllib.parse import quote

from aws_lambda_powertools import Logger

from core.models.errors import BackendReadError, BackendWriteError, ValidationError
from core.models.image import StoredObject
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import DEFAULT_PUBLIC_MOUNT, STORAGE_LOCAL, THUMBNAIL_DIR_NAME
from core.utils.naming import is_thumbnail_name
from core.utils.time import from_timestamp

logger = Logger(UTC=True)


class LocalImageStorage(ImageStorageRepository):
    """Image storage on the local filesystem.

    Originals live directly in ``root``; thumbnails live in the nested
    ``thumbs`` directory. Writes go straight to the final path.
    """

    name = STORAGE_LOCAL

    def __init__(
        self,
        root: Path | str,
        *,
        public_mount: str = DEFAULT_PUBLIC_MOUNT,
        base_url: str | None = None,
    ) -> None:
        self.root = Path(root)
        self.thumbnail_dir = self.root / THUMBNAIL_DIR_NAME
        self.public_mount = "/" + public_mount.strip("/")
        self.base_url = base_url.rstrip("/") if base_url else None

        self.root.mkdir(parents=True, exist_ok=True)
        self.thumbnail_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        """Resolve a key inside its directory, preventing path traversal."""
        directory = self.thumbnail_dir if is_thumbnail_name(key) else self.root
        candidate = (directory / key).resolve()

        if candidate.parent != directory.resolve():
            raise ValidationError(
                message="Invalid file name",
                details={"file": key},
            )

        return candidate

    def put(
        self,
        *,
        key: str,
        data: bytes,
        media_type: str,
        base_url: str | None = None,
    ) -> str:
        """Write bytes to disk and return the public URL."""
        path = self._path_for(key)
        logger.debug(
            "Writing file",
            extra={"file": key, "size": len(data), "media_type": media_type},
        )

        try:
            path.write_bytes(data)
        except OSError as exc:
            logger.error("Local write failed", extra={"file": key, "error": exc.strerror})
            raise BackendWriteError(
                message="Unable to store image at this time",
                details={"file": key},
            ) from exc

        logger.info("File written successfully", extra={"file": key})
        return self.url_for(key, base_url=base_url)

    def list_objects(self) -> Iterator[StoredObject]:
        """Yield regular files in the originals and thumbnails directories."""
        logger.debug("Listing files", extra={"root": str(self.root)})

        try:
            for directory in (self.root, self.thumbnail_dir):
                for entry in directory.iterdir():
                    if not entry.is_file() or entry.name.startswith("."):
                        continue

                    try:
                        stat = entry.stat()
                    except FileNotFoundError:
                        # Removed between iterdir() and stat().
                        continue

                    yield StoredObject(
                        name=entry.name,
                        size_bytes=stat.st_size,
                        last_modified=from_timestamp(stat.st_mtime),
                    )

        except OSError as exc:
            logger.error("Local listing failed", extra={"error": exc.strerror})
            raise BackendReadError(message="Unable to list images at this time") from exc

    def delete(self, *, key: str) -> bool:
        """Remove a file if present."""
        path = self._path_for(key)
        logger.debug("Deleting file", extra={"file": key})

        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("File already absent", extra={"file": key})
            return False
        except OSError as exc:
            logger.error("Local deletion failed", extra={"file": key, "error": exc.strerror})
            raise BackendReadError(
                message="Unable to delete image at this time",
                details={"file": key},
            ) from exc

        logger.info("File deleted successfully", extra={"file": key})
        return True

    def url_for(self, key: str, *, base_url: str | None = None) -> str:
        """Return ``{base}{mount}[/thumbs]/{name}``; relative when no base is known.

        A configured base URL takes precedence over one derived per request.
        """
        base = self.base_url or (base_url.rstrip("/") if base_url else "")
        mount = self.public_mount.rstrip("/")

        if is_thumbnail_name(key):
            return f"{base}{mount}/{THUMBNAIL_DIR_NAME}/{quote(key)}"
        return f"{base}{mount}/{quote(key)}"
