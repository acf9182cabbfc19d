import base64
import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def local_env(monkeypatch, tmp_path, clean_bootstrap) -> Path:
    """Point the process-level pipeline at a fresh local upload directory."""
    upload_dir = tmp_path / "uploads"

    monkeypatch.setenv("STORAGE", "local")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("BASE_URL", "http://localhost:3000")
    for name in ("ADMIN_KEY", "MAX_FILE_SIZE_BYTES", "VERIFY_THUMBNAILS", "PUBLIC_MOUNT"):
        monkeypatch.delenv(name, raising=False)

    return upload_dir


@pytest.fixture
def upload_event():
    """Build a JSON upload event for the given bytes."""

    def _event(data: bytes, content_type: str | None = None, **extra: Any) -> dict[str, Any]:
        body: dict[str, Any] = {"file": base64.b64encode(data).decode()}
        if content_type:
            body["content_type"] = content_type

        event: dict[str, Any] = {
            "httpMethod": "POST",
            "path": "/upload",
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(body),
            "isBase64Encoded": False,
        }
        event.update(extra)
        return event

    return _event


@pytest.fixture
def list_images_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "path": "/images",
        "headers": {"Host": "localhost:3000"},
        "queryStringParameters": None,
    }


@pytest.fixture
def delete_image_event():
    def _event(file_name: str | None, key: str | None = None) -> dict[str, Any]:
        return {
            "httpMethod": "DELETE",
            "path": f"/images/{file_name}",
            "pathParameters": {"file": file_name} if file_name is not None else None,
            "queryStringParameters": {"key": key} if key is not None else None,
            "headers": {},
        }

    return _event


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    return json.loads(body) if body else {}


@pytest.fixture
def body_of():
    return parse_body
