"""Thumbnail derivation backed by Pillow."""

import io

from aws_lambda_powertools import Logger
from PIL import Image

from core.models.errors import ThumbnailGenerationError
from core.utils.constants import (
    PILLOW_FORMAT_MAP,
    THUMBNAIL_MAX_HEIGHT,
    THUMBNAIL_MAX_WIDTH,
)

logger = Logger(UTC=True)

# Modes each encoder can write without conversion.
_ENCODER_MODES: dict[str, tuple[str, ...]] = {
    "JPEG": ("RGB", "L", "CMYK"),
    "PNG": ("RGB", "RGBA", "L", "LA", "P", "1", "I", "I;16"),
    "WEBP": ("RGB", "RGBA"),
    "GIF": ("P", "L"),
    "AVIF": ("RGB", "RGBA"),
}


class ThumbnailGenerator:
    """Create bounded-size copies of uploaded images.

    The thumbnail fits inside ``max_size`` with its aspect ratio preserved
    and is re-encoded in the same format as the input. Images already
    inside the box keep their dimensions.
    """

    def __init__(
        self,
        max_size: tuple[int, int] = (THUMBNAIL_MAX_WIDTH, THUMBNAIL_MAX_HEIGHT),
    ) -> None:
        self.max_size = max_size

    def create_thumbnail(self, file_data: bytes, mime_type: str) -> bytes:
        """Return encoded thumbnail bytes for an image.

        Raises:
            ThumbnailGenerationError: If the image cannot be decoded or encoded
        """
        image_format = PILLOW_FORMAT_MAP.get(mime_type)
        if image_format is None:
            raise ThumbnailGenerationError(
                message="Unable to generate thumbnail for this file type",
                details={"media_type": mime_type},
            )

        try:
            with Image.open(io.BytesIO(file_data)) as source:
                source.load()
                image = source.copy()

            image.thumbnail(self.max_size, Image.Resampling.LANCZOS)
            image = self._prepare_mode(image, image_format)

            output = io.BytesIO()
            image.save(output, format=image_format)

        except Exception as exc:
            logger.exception(
                "Thumbnail generation failed",
                extra={"media_type": mime_type, "size": len(file_data)},
            )
            raise ThumbnailGenerationError(
                message="Unable to process image",
                details={"media_type": mime_type},
            ) from exc

        logger.debug(
            "Thumbnail generated",
            extra={"media_type": mime_type, "width": image.width, "height": image.height},
        )
        return output.getvalue()

    @staticmethod
    def _prepare_mode(image: Image.Image, image_format: str) -> Image.Image:
        allowed = _ENCODER_MODES.get(image_format, ("RGB",))
        if image.mode in allowed:
            return image

        if image_format == "GIF":
            return image.convert("P", palette=Image.Palette.ADAPTIVE)

        has_alpha = "A" in image.getbands() or "transparency" in image.info
        if has_alpha and "RGBA" in allowed:
            return image.convert("RGBA")

        return image.convert("RGB")
