"""Immutable service configuration."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.models.errors import ConfigurationError
from core.utils.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_PUBLIC_MOUNT,
    DEFAULT_UPLOAD_DIR,
    ENV_ADMIN_KEY,
    ENV_AWS_BUCKET,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_BASE_URL,
    ENV_MAX_FILE_SIZE_BYTES,
    ENV_PUBLIC_MOUNT,
    ENV_STORAGE,
    ENV_UPLOAD_DIR,
    ENV_VERIFY_THUMBNAILS,
    STORAGE_LOCAL,
    STORAGE_S3,
    SUPPORTED_STORAGE_BACKENDS,
)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class ServiceSettings(BaseModel):
    """Process-wide settings, constructed once at startup.

    Instances are frozen; components receive them explicitly instead of
    reading the environment themselves.
    """

    model_config = ConfigDict(frozen=True)

    storage: str = Field(default=STORAGE_LOCAL, description="Active storage backend")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0)
    admin_key: str = Field(default="", description="Shared secret required by delete")
    base_url: str | None = Field(default=None, description="Public base URL override")
    upload_dir: str = Field(default=DEFAULT_UPLOAD_DIR)
    public_mount: str = Field(default=DEFAULT_PUBLIC_MOUNT)
    verify_thumbnails: bool = Field(default=False)

    aws_bucket: str | None = None
    aws_region: str = DEFAULT_AWS_REGION
    aws_endpoint_url: str | None = None

    # admin_key is compared byte for byte and must not be trimmed.
    @field_validator(
        "storage",
        "base_url",
        "upload_dir",
        "public_mount",
        "aws_bucket",
        "aws_region",
        "aws_endpoint_url",
        mode="before",
    )
    @classmethod
    def strip_whitespace(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("storage")
    @classmethod
    def normalize_storage(cls, value: str) -> str:
        storage = value.lower()
        if storage not in SUPPORTED_STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend '{value}'. "
                f"Allowed: {', '.join(sorted(SUPPORTED_STORAGE_BACKENDS))}"
            )
        return storage

    @field_validator("base_url", "aws_endpoint_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        if not value:
            return None
        return value.rstrip("/")

    @field_validator("public_mount")
    @classmethod
    def normalize_public_mount(cls, value: str) -> str:
        return "/" + value.strip("/")

    @model_validator(mode="after")
    def require_bucket_for_s3(self) -> "ServiceSettings":
        if self.storage == STORAGE_S3 and not self.aws_bucket:
            raise ValueError(f"{ENV_AWS_BUCKET} is required when {ENV_STORAGE}={STORAGE_S3}")
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceSettings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If a value is missing or malformed
        """
        env = os.environ if environ is None else environ

        raw: dict[str, object] = {
            "storage": env.get(ENV_STORAGE, STORAGE_LOCAL),
            "admin_key": env.get(ENV_ADMIN_KEY, ""),
            "base_url": env.get(ENV_BASE_URL),
            "upload_dir": env.get(ENV_UPLOAD_DIR, DEFAULT_UPLOAD_DIR),
            "public_mount": env.get(ENV_PUBLIC_MOUNT, DEFAULT_PUBLIC_MOUNT),
            "verify_thumbnails": env.get(ENV_VERIFY_THUMBNAILS, "").strip().lower() in _TRUE_VALUES,
            "aws_bucket": env.get(ENV_AWS_BUCKET) or None,
            "aws_region": env.get(ENV_AWS_REGION) or DEFAULT_AWS_REGION,
            "aws_endpoint_url": env.get(ENV_AWS_ENDPOINT_URL),
        }
        if env.get(ENV_MAX_FILE_SIZE_BYTES):
            raw["max_file_size"] = env[ENV_MAX_FILE_SIZE_BYTES]

        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigurationError(
                message="Invalid service configuration",
                details={"errors": [err["msg"] for err in exc.errors()]},
            ) from exc
