"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from core.models.image import StoredObject


class ImageStorageRepository(ABC):
    """Contract for storing, enumerating and removing image blobs.

    Blobs are addressed by logical file name; each implementation maps
    names onto its own physical layout (directories, key prefixes).
    Handlers depend on this interface, not the implementation.
    """

    #: Short backend identifier reported by the health endpoint.
    name: str

    @abstractmethod
    def put(
        self,
        *,
        key: str,
        data: bytes,
        media_type: str,
        base_url: str | None = None,
    ) -> str:
        """Store a blob, overwriting any existing blob with the same key.

        Args:
            key: Logical file name
            data: Binary content
            media_type: MIME type recorded with the blob
            base_url: Optional public base URL for relative backends

        Returns:
            Public URL of the stored blob

        Raises:
            BackendWriteError: If the write fails
        """

    @abstractmethod
    def list_objects(self) -> Iterator[StoredObject]:
        """Enumerate every stored blob, originals and thumbnails alike.

        Each call starts a fresh enumeration; implementations may page
        internally.

        Raises:
            BackendReadError: If enumeration fails
        """

    @abstractmethod
    def delete(self, *, key: str) -> bool:
        """Remove a blob. Removing a missing blob is not an error.

        Returns:
            True if a blob was removed, False if it was already absent
            (backends that cannot tell report True)

        Raises:
            BackendReadError: If the deletion fails
        """

    @abstractmethod
    def url_for(self, key: str, *, base_url: str | None = None) -> str:
        """Return the public URL for a key. Pure; performs no I/O."""
