"""Image Ingest Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless image upload service with content sniffing, thumbnails "
    "and local or S3 storage"
)

__all__ = ["handlers", "core"]
