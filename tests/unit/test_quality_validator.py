import pytest

from civicscan.quality.validator import (
    MAX_SIZE_BYTES,
    TOO_LARGE,
    TOO_SMALL,
    UNREADABLE_IMAGE,
    UNSUPPORTED_FORMAT,
    QualityValidator,
    describe_image,
)


class TestValidImages:
    def test_accepts_jpeg(self, checkerboard_jpeg_bytes: bytes) -> None:
        report = QualityValidator().validate(checkerboard_jpeg_bytes)
        assert report.is_valid is True
        assert report.violations == []
        assert report.suggestions == []

    def test_accepts_png(self, checkerboard_png_bytes: bytes) -> None:
        report = QualityValidator().validate(checkerboard_png_bytes)
        assert report.is_valid is True

    def test_accepts_webp(self, make_image_bytes) -> None:
        report = QualityValidator().validate(make_image_bytes("WEBP"))
        assert report.is_valid is True
        assert report.descriptor is not None
        assert report.descriptor.format == "webp"

    def test_descriptor_carries_metadata(self, checkerboard_png_bytes: bytes) -> None:
        report = QualityValidator().validate(checkerboard_png_bytes)
        assert report.descriptor is not None
        assert report.descriptor.format == "png"
        assert report.descriptor.width_px == 200
        assert report.descriptor.height_px == 200
        assert report.descriptor.size_bytes == len(checkerboard_png_bytes)

    def test_exact_minimum_dimension_is_accepted(self, make_image_bytes) -> None:
        report = QualityValidator().validate(make_image_bytes("PNG", size=100))
        assert report.is_valid is True


class TestTooSmall:
    def test_rejects_small_image(self, small_png_bytes: bytes) -> None:
        report = QualityValidator().validate(small_png_bytes)
        assert report.is_valid is False
        assert TOO_SMALL in report.violations
        assert "Upload a larger image for better analysis" in report.suggestions

    @pytest.mark.parametrize("size", [1, 50, 99])
    def test_rejects_below_minimum(self, make_image_bytes, size: int) -> None:
        report = QualityValidator().validate(make_image_bytes("PNG", size=size))
        assert TOO_SMALL in report.violations


class TestTooLarge:
    def test_rejects_large_payload_regardless_of_dimensions(
        self, checkerboard_png_bytes: bytes
    ) -> None:
        padded = checkerboard_png_bytes + b"\0" * MAX_SIZE_BYTES
        report = QualityValidator().validate(padded)
        assert report.is_valid is False
        assert TOO_LARGE in report.violations
        assert TOO_SMALL not in report.violations

    def test_large_small_image_reports_both(self, small_png_bytes: bytes) -> None:
        padded = small_png_bytes + b"\0" * MAX_SIZE_BYTES
        report = QualityValidator().validate(padded)
        assert report.violations == [TOO_LARGE, TOO_SMALL]
        assert len(report.suggestions) == 2


class TestFormat:
    def test_rejects_gif(self, gif_bytes: bytes) -> None:
        report = QualityValidator().validate(gif_bytes)
        assert report.is_valid is False
        assert report.violations == [UNSUPPORTED_FORMAT]
        assert report.messages == ["Unsupported format: gif"]
        assert report.descriptor is not None
        assert report.descriptor.format == "other"

    def test_rejects_bmp(self, make_image_bytes) -> None:
        report = QualityValidator().validate(make_image_bytes("BMP"))
        assert UNSUPPORTED_FORMAT in report.violations


class TestUnreadable:
    def test_corrupt_bytes_are_unreadable_not_unsupported(self) -> None:
        report = QualityValidator().validate(b"definitely not an image")
        assert report.is_valid is False
        assert report.violations == [UNREADABLE_IMAGE]
        assert UNSUPPORTED_FORMAT not in report.violations
        assert report.descriptor is None

    def test_empty_bytes_are_unreadable(self) -> None:
        report = QualityValidator().validate(b"")
        assert report.violations == [UNREADABLE_IMAGE]

    def test_validate_never_raises(self) -> None:
        QualityValidator().validate(b"\x89PNG\r\n\x1a\n" + b"\x00" * 10)


class TestDescribeImage:
    def test_returns_raw_format_name(self, gif_bytes: bytes) -> None:
        descriptor, raw_format = describe_image(gif_bytes)
        assert raw_format == "gif"
        assert descriptor.format == "other"
