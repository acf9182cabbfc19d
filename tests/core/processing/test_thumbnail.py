import io

import pytest
from PIL import Image, features

from core.models.errors import ThumbnailGenerationError
from core.processing.thumbnail import ThumbnailGenerator


def open_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.fixture
def generator() -> ThumbnailGenerator:
    return ThumbnailGenerator()


class TestCreateThumbnail:
    def test_small_image_is_not_upscaled(self, generator, sample_png) -> None:
        thumb = open_image(generator.create_thumbnail(sample_png, "image/png"))

        assert thumb.size == (800, 600)
        assert thumb.format == "PNG"

    def test_wide_image_is_bounded(self, generator, make_image) -> None:
        data = make_image("PNG", (2048, 1024))

        thumb = open_image(generator.create_thumbnail(data, "image/png"))

        assert thumb.size == (1024, 512)

    def test_tall_image_is_bounded(self, generator, make_image) -> None:
        data = make_image("JPEG", (1000, 3000))

        thumb = open_image(generator.create_thumbnail(data, "image/jpeg"))

        assert thumb.height == 1024
        assert thumb.width <= 1024
        assert thumb.format == "JPEG"

    def test_exact_bound_is_unchanged(self, generator, make_image) -> None:
        data = make_image("PNG", (1024, 1024))

        assert open_image(generator.create_thumbnail(data, "image/png")).size == (1024, 1024)

    @pytest.mark.parametrize(
        "image_format,mime_type,mode",
        [
            ("GIF", "image/gif", "RGB"),
            ("JPEG", "image/jpeg", "RGB"),
            ("WEBP", "image/webp", "RGBA"),
            ("PNG", "image/png", "RGBA"),
        ],
    )
    def test_format_is_preserved(self, generator, make_image, image_format, mime_type, mode) -> None:
        data = make_image(image_format, (1600, 1200), mode=mode)

        thumb = open_image(generator.create_thumbnail(data, mime_type))

        assert thumb.format == image_format
        assert thumb.size == (1024, 768)

    @pytest.mark.skipif(not features.check("avif"), reason="Pillow built without AVIF support")
    def test_avif(self, generator, make_image) -> None:
        data = make_image("AVIF", (2000, 1000))

        thumb = open_image(generator.create_thumbnail(data, "image/avif"))

        assert thumb.size == (1024, 512)

    def test_corrupt_pixel_data(self, generator) -> None:
        data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

        with pytest.raises(ThumbnailGenerationError) as exc:
            generator.create_thumbnail(data, "image/png")

        assert exc.value.error_code == "THUMBNAIL_GENERATION_FAILED"

    def test_unknown_format(self, generator, sample_png) -> None:
        with pytest.raises(ThumbnailGenerationError):
            generator.create_thumbnail(sample_png, "image/bmp")

    def test_custom_bounds(self, sample_png) -> None:
        thumb = open_image(ThumbnailGenerator(max_size=(200, 200)).create_thumbnail(sample_png, "image/png"))

        assert thumb.size == (200, 150)
