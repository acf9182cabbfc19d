import base64
from http import HTTPStatus

from core.infrastructure.local.local_image_storage import LocalImageStorage
from core.models.errors import BackendWriteError
from handlers.upload_image.handler import handler


class TestUploadHandler:
    def test_upload_json_success(self, local_env, upload_event, lambda_context, sample_png, body_of) -> None:
        resp = handler(upload_event(sample_png, "image/png"), lambda_context)
        body = body_of(resp)

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert body["mediaType"] == "image/png"
        assert body["sizeBytes"] == len(sample_png)
        assert body["id"] == body["file"]
        assert body["url"] == f"http://localhost:3000/uploads/{body['file']}"
        assert body["thumbnailUrl"].endswith("_thumb.png")
        assert "/uploads/thumbs/" in body["thumbnailUrl"]
        assert body["createdAt"]
        assert (local_env / body["file"]).is_file()

    def test_upload_binary_body(self, local_env, lambda_context, make_image, body_of) -> None:
        data = make_image("JPEG", (64, 64))
        event = {
            "httpMethod": "POST",
            "headers": {"content-type": "image/jpeg"},
            "body": base64.b64encode(data).decode(),
            "isBase64Encoded": True,
        }

        resp = handler(event, lambda_context)

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert body_of(resp)["file"].endswith(".jpeg")

    def test_base_url_from_request_headers(
        self, local_env, monkeypatch, upload_event, lambda_context, sample_png, body_of
    ) -> None:
        monkeypatch.delenv("BASE_URL")
        event = upload_event(
            sample_png,
            headers={"Content-Type": "application/json", "Host": "img.example.com"},
        )

        body = body_of(handler(event, lambda_context))

        assert body["url"].startswith("https://img.example.com/uploads/")

    def test_missing_file(self, local_env, lambda_context, body_of) -> None:
        resp = handler({"httpMethod": "POST", "body": "{}"}, lambda_context)
        body = body_of(resp)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["errors"][0]["field"] == "file"

    def test_invalid_base64(self, local_env, lambda_context, body_of) -> None:
        resp = handler({"httpMethod": "POST", "body": '{"file": "not base64!!"}'}, lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body_of(resp)["details"]["errors"][0]["message"] == "File must be a valid Base64-encoded string"

    def test_invalid_json(self, local_env, lambda_context, body_of) -> None:
        resp = handler({"httpMethod": "POST", "body": "{not json"}, lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body_of(resp)["message"] == "Invalid JSON body"

    def test_payload_too_large(self, local_env, monkeypatch, upload_event, lambda_context, sample_png, body_of) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_BYTES", "100")

        resp = handler(upload_event(sample_png), lambda_context)

        assert resp["statusCode"] == HTTPStatus.REQUEST_ENTITY_TOO_LARGE
        assert body_of(resp)["error"] == "PAYLOAD_TOO_LARGE"
        assert list(local_env.iterdir()) == [local_env / "thumbs"]

    def test_unsupported_media_type(self, local_env, upload_event, lambda_context, body_of) -> None:
        resp = handler(upload_event(b"MZ\x90\x00" + b"\x00" * 60, "image/png"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.UNSUPPORTED_MEDIA_TYPE
        assert body_of(resp)["error"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_undecodable_image(self, local_env, upload_event, lambda_context, body_of) -> None:
        resp = handler(upload_event(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64), lambda_context)

        assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
        assert body_of(resp)["error"] == "THUMBNAIL_GENERATION_FAILED"

    def test_backend_failure_hides_details(
        self, local_env, monkeypatch, upload_event, lambda_context, sample_png, body_of
    ) -> None:
        def fail(self, **_):
            raise BackendWriteError(message="Unable to store image at this time", details={"file": "x"})

        monkeypatch.setattr(LocalImageStorage, "put", fail)

        resp = handler(upload_event(sample_png), lambda_context)
        body = body_of(resp)

        assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
        assert body["error"] == "BACKEND_WRITE_FAILED"
        assert "details" not in body

    def test_options_preflight(self, local_env, lambda_context) -> None:
        resp = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert resp["statusCode"] == HTTPStatus.NO_CONTENT
