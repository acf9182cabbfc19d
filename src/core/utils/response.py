"""
API Gateway proxy responses for the image ingest endpoints.

Every response is JSON with permissive CORS headers. Error bodies share
one shape: ``{"error": <code>, "message": <text>, "timestamp": <iso>}``
with optional ``details`` for client errors.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from core.models.errors import ImageServiceError
from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]

_BASE_HEADERS: dict[str, str] = {
    "Content-Type": DEFAULT_CONTENT_TYPE,
    "Access-Control-Allow-Origin": CORS_ORIGIN,
    "Access-Control-Allow-Headers": CORS_HEADERS,
    "Access-Control-Allow-Methods": CORS_METHODS,
    "Access-Control-Expose-Headers": EXPOSE_HEADERS,
}


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    @staticmethod
    def headers(cors_origin: str | None = None) -> dict[str, str]:
        headers = dict(_BASE_HEADERS)
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin
        return headers

    @staticmethod
    def build(
        status: HTTPStatus,
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload = dict(body)
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": ResponseBuilder.headers(cors_origin),
            "body": json.dumps(payload),
        }

    @staticmethod
    def ok(body: JsonDict, **kwargs: Any) -> JsonDict:
        return ResponseBuilder.build(HTTPStatus.OK, body, **kwargs)

    @staticmethod
    def created(body: JsonDict, **kwargs: Any) -> JsonDict:
        return ResponseBuilder.build(HTTPStatus.CREATED, body, **kwargs)

    @staticmethod
    def no_content(*, cors_origin: str | None = None) -> JsonDict:
        """Empty response used for CORS preflight."""
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": ResponseBuilder.headers(cors_origin),
            "body": "",
        }

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return ResponseBuilder.build(
            status,
            payload,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def service_error(
        exc: ImageServiceError,
        status: HTTPStatus,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Render a domain error.

        ``details`` are only included for 4xx statuses; server-side
        failures expose the code and message alone.
        """
        return ResponseBuilder.error(
            status=status,
            error=exc.error_code,
            message=exc.message,
            details=exc.details if status < HTTPStatus.INTERNAL_SERVER_ERROR else None,
            request_id=request_id,
            cors_origin=cors_origin,
        )
