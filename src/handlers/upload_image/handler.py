"""
Lambda handler responsible for image upload.
"""

import base64
import binascii
import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import ImageServiceError, ValidationError
from core.services.bootstrap import get_pipeline, get_settings
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.request import get_header, resolve_base_url
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ImageUploadRequest, ImageUploadResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


def _read_upload(event: dict[str, Any]) -> tuple[bytes, str | None]:
    """Extract file bytes and the declared type from the event.

    Binary bodies (``isBase64Encoded``) carry the declared type in the
    Content-Type header; anything else is parsed as an `ImageUploadRequest`.
    """
    content_type = get_header(event, "Content-Type")
    is_json = bool(content_type) and "json" in content_type.lower()

    if event.get("isBase64Encoded") and not is_json:
        try:
            return base64.b64decode(event.get("body") or "", validate=True), content_type
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(message="Invalid request body") from exc

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise ValidationError(message="Invalid JSON body")

    request = validate_request(ImageUploadRequest, body)
    return request.file_bytes(), request.content_type


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler decodes the uploaded image, hands it to the pipeline for
    validation, thumbnailing and storage, and returns the public metadata
    of the new asset.

    Expected API Gateway event structure:
    {
        "body": "{\"file\": \"<base64>\", \"content_type\": \"image/png\"}",
        "isBase64Encoded": false
    }
    or a raw binary body with "isBase64Encoded": true and a Content-Type header.

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing created asset metadata
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    file_data, declared_type = _read_upload(event)
    base_url = resolve_base_url(event, get_settings().base_url)

    try:
        asset = get_pipeline().upload(
            file_data=file_data,
            declared_type=declared_type,
            base_url=base_url,
        )
    except ImageServiceError:
        metrics.add_metric(name="UploadsRejected", unit=MetricUnit.Count, value=1)
        raise

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)

    response = ImageUploadResponse(
        id=asset.id,
        file=asset.file,
        url=asset.url,
        thumbnail_url=asset.thumbnail_url,
        media_type=asset.media_type,
        size_bytes=asset.size_bytes,
        created_at=asset.created_at,
        message="Image uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump(by_alias=True))
