"""Shared image asset models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class StoredObject(BaseModel):
    """One blob as reported by a storage backend enumeration."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., description="Logical file name of the blob")
    size_bytes: StrictInt = Field(..., ge=0, description="Blob size in bytes")
    last_modified: datetime = Field(..., description="Last modification time (UTC)")


class UploadedAsset(BaseModel):
    """Public metadata returned after a successful upload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: StrictStr = Field(..., description="Generated file name of the original")
    file: StrictStr = Field(..., description="Generated file name of the original")
    thumbnail_file: StrictStr = Field(..., description="Derived thumbnail file name")
    url: StrictStr = Field(..., description="Public URL of the original")
    thumbnail_url: StrictStr = Field(..., description="Public URL of the thumbnail")
    media_type: StrictStr = Field(..., description="Sniffed MIME type")
    size_bytes: StrictInt = Field(..., description="Size of the original in bytes")
    created_at: StrictStr = Field(..., description="ISO-8601 persistence timestamp (UTC)")


class AssetListingEntry(BaseModel):
    """Projection of a stored asset, derived on demand for listings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file: StrictStr = Field(..., description="File name of the original")
    url: StrictStr = Field(..., description="Public URL of the original")
    thumbnail_url: StrictStr | None = Field(
        None,
        description="Public URL of the derived thumbnail",
    )
    size_bytes: StrictInt = Field(..., description="Size of the original in bytes")
    date: StrictStr = Field(..., description="ISO-8601 last modification time (UTC)")


class ListAssetsResponse(BaseModel):
    """Response for listing assets, most recent first."""

    images: list[AssetListingEntry] = Field(..., description="Listing entries")
    count: StrictInt = Field(..., description="Number of entries returned")
