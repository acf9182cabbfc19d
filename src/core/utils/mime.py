"""Media type sniffing and validation for uploaded content."""

from collections.abc import Mapping

from aws_lambda_powertools import Logger

from core.models.errors import UnsupportedMediaTypeError
from core.utils.constants import ALLOWED_MIME_TYPES, MIME_TYPE_EXTENSION_MAP

logger = Logger(UTC=True)

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
    b"%PDF-": "application/pdf",
    b"PK\x03\x04": "application/zip",
    b"MZ": "application/x-msdownload",
    b"\x7fELF": "application/x-executable",
    b"\xca\xfe\xba\xbe": "application/java-vm",
    b"#!": "text/x-shellscript",
}

# ISO base media brands found at offset 8 of an "ftyp" box.
FTYP_BRANDS: Mapping[bytes, str] = {
    b"avif": "image/avif",
    b"avis": "image/avif",
    b"heic": "image/heic",
    b"heix": "image/heic",
    b"mif1": "image/heif",
}


def detect_mime_type(file_data: bytes) -> str | None:
    """Return the media type implied by leading bytes, or None if unknown."""
    if len(file_data) >= 12 and file_data[:4] == b"RIFF":
        if file_data[8:12] == b"WEBP":
            return "image/webp"
        if file_data[8:12] == b"WAVE":
            return "audio/wav"
        if file_data[8:12] == b"AVI ":
            return "video/x-msvideo"
        return None

    if len(file_data) >= 12 and file_data[4:8] == b"ftyp":
        return FTYP_BRANDS.get(file_data[8:12], "video/mp4")

    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    return None


def resolve_media_type(file_data: bytes, declared_type: str | None) -> str:
    """Resolve the media type of an upload.

    The sniffed type always wins. The client-declared type is only used
    when sniffing is inconclusive; it is normalized but otherwise trusted
    as-is, so callers must pass the result through `validate_media_type`.
    """
    return detect_mime_type(file_data) or _normalize_declared(declared_type)


def _normalize_declared(declared_type: str | None) -> str:
    """Strip parameters and case from a client-supplied Content-Type."""
    return (declared_type or "").split(";", 1)[0].strip().lower() or "application/octet-stream"


def validate_media_type(file_data: bytes, declared_type: str | None) -> str:
    """Resolve and check an upload's media type against the allow-list.

    An allow-listed type is only accepted when its signature was actually
    found in the content; a declared image type on unrecognised bytes is
    rejected.

    Returns:
        The sniffed MIME type

    Raises:
        UnsupportedMediaTypeError: If the resolved type is not allowed
    """
    sniffed = detect_mime_type(file_data)
    resolved = sniffed or _normalize_declared(declared_type)

    if resolved not in ALLOWED_MIME_TYPES or sniffed != resolved:
        logger.warning(
            "Rejected upload media type",
            extra={
                "resolved_type": resolved,
                "declared_type": declared_type,
                "signature_matched": sniffed is not None,
            },
        )
        raise UnsupportedMediaTypeError(
            message="Unsupported file type",
            details={
                "media_type": resolved,
                "allowed": sorted(ALLOWED_MIME_TYPES),
            },
        )

    return resolved


def extension_for(mime_type: str) -> str:
    """Return the canonical file extension for an allowed MIME type."""
    extensions = MIME_TYPE_EXTENSION_MAP.get(mime_type)
    if not extensions:
        raise UnsupportedMediaTypeError(
            message="Unsupported file type",
            details={"media_type": mime_type},
        )
    return extensions[0]
