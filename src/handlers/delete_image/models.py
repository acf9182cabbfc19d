"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import FILE_NAME_PATTERN, MAX_FILE_NAME_LENGTH


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request.

    Only ``file`` is trimmed; ``key`` must match the configured admin key
    exactly.
    """

    file: str = Field(
        ...,
        min_length=1,
        max_length=MAX_FILE_NAME_LENGTH,
        pattern=FILE_NAME_PATTERN,
        description="File name of the original to delete",
    )
    key: str | None = Field(None, description="Admin key, when one is configured")

    @field_validator("file", mode="before")
    @classmethod
    def strip_file(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class DeleteImageResponse(BaseModel):
    """Response model for successful image deletion."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = Field(True, description="Always true on success")
    file: str = Field(..., description="Deleted file name")
    deleted_at: str = Field(..., alias="deletedAt", description="Deletion timestamp")
    message: str = Field(..., description="Success message")
