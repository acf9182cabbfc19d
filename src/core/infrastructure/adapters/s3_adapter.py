"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Iterator, Mapping
from typing import Any, Protocol

import boto3

from core.models.errors import ConfigurationError
from core.models.settings import ServiceSettings


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        ACL: str,
    ) -> Any: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...

    def get_paginator(self, operation_name: str) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    bucket: str
    region: str
    endpoint_url: str | None

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        acl: str,
    ) -> None: ...

    def delete_object(self, *, key: str) -> None: ...

    def iter_objects(self, *, prefix: str) -> Iterator[Mapping[str, Any]]: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: ServiceSettings) -> None:
        """Create S3 client from service settings."""
        if not settings.aws_bucket:
            raise ConfigurationError(message="S3 bucket name is not configured")

        self.bucket = settings.aws_bucket
        self.region = settings.aws_region
        self.endpoint_url = settings.aws_endpoint_url
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        acl: str,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ACL=acl,
        )

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self.bucket,
            Key=key,
        )

    def iter_objects(self, *, prefix: str) -> Iterator[Mapping[str, Any]]:
        """Yield object summaries under a prefix, following continuation tokens.
        Raises boto3 exceptions - caught by domain implementation.
        """
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            yield from page.get("Contents", [])
