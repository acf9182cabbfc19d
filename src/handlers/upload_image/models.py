"""Pydantic models for image upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = Logger(UTC=True)


class ImageUploadRequest(BaseModel):
    """Validation model for a JSON image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    content_type: str | None = Field(
        None,
        max_length=255,
        description="Client-declared MIME type (used only if sniffing is inconclusive)",
    )
    file_name: str | None = Field(
        None,
        max_length=255,
        description="Client-side file name (informational only)",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly

        Size limits are enforced by the pipeline, not here.
        """
        if not value:
            raise ValueError("No file uploaded")

        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error("File validation error: invalid base64")
            raise ValueError("Invalid base64 encoded file") from e

        return value

    def file_bytes(self) -> bytes:
        """Return the decoded upload."""
        return base64.b64decode(self.file, validate=True)


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Asset identifier (original file name)")
    file: str = Field(..., description="Original file name")
    url: str = Field(..., description="Public URL of the original")
    thumbnail_url: str = Field(..., alias="thumbnailUrl", description="Public URL of the thumbnail")
    media_type: str = Field(..., alias="mediaType", description="Sniffed MIME type")
    size_bytes: int = Field(..., alias="sizeBytes", description="Original size in bytes")
    created_at: str = Field(..., alias="createdAt", description="Creation timestamp")
    message: str = Field(..., description="Success message")
