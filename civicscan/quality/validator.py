"""Structural image checks that run before any network call."""

import io

from PIL import Image

from civicscan.logging.logger import Log
from civicscan.quality.models import SUPPORTED_FORMATS, ImageDescriptor, QualityReport

MIN_DIMENSION_PX = 100
MAX_SIZE_BYTES = 10 * 1024 * 1024

TOO_SMALL = "too small"
TOO_LARGE = "too large"
UNSUPPORTED_FORMAT = "unsupported format"
UNREADABLE_IMAGE = "unreadable image"

_SUGGESTIONS: dict[str, str] = {
    TOO_SMALL: "Upload a larger image for better analysis",
    TOO_LARGE: "Compress the image or upload a smaller file",
    UNSUPPORTED_FORMAT: "Upload JPEG, PNG, or WebP images only",
    UNREADABLE_IMAGE: "Check if the file is a valid image",
}

# Pillow reports multi-picture camera JPEGs as MPO.
_FORMAT_ALIASES: dict[str, str] = {
    "JPEG": "jpeg",
    "MPO": "jpeg",
    "PNG": "png",
    "WEBP": "webp",
}


def describe_image(image_bytes: bytes) -> tuple[ImageDescriptor, str]:
    """Read format and dimensions without decoding pixel data.

    Returns:
        The descriptor and the format name as reported by Pillow.

    Raises:
        OSError, SyntaxError, ValueError: if the bytes are not a decodable image.
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        raw_format = img.format or ""
        width, height = img.size
    descriptor = ImageDescriptor(
        format=_FORMAT_ALIASES.get(raw_format.upper(), "other"),
        width_px=width,
        height_px=height,
        size_bytes=len(image_bytes),
    )
    return descriptor, raw_format.lower()


class QualityValidator:
    """Rejects images that are too small, too large, unsupported or corrupt."""

    def validate(self, image_bytes: bytes) -> QualityReport:
        violations: list[str] = []
        messages: list[str] = []

        if len(image_bytes) >= MAX_SIZE_BYTES:
            violations.append(TOO_LARGE)
            messages.append("Image file too large (maximum 10MB)")

        try:
            descriptor, raw_format = describe_image(image_bytes)
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            Log.warning(f"Image metadata could not be decoded: {exc}")
            violations.append(UNREADABLE_IMAGE)
            messages.append("Unable to process image file")
            return self._report(violations, messages, descriptor=None)

        Log.info(
            f"Image metadata: format={descriptor.format} "
            f"size={descriptor.width_px}x{descriptor.height_px} "
            f"bytes={descriptor.size_bytes}"
        )

        if descriptor.width_px < MIN_DIMENSION_PX or descriptor.height_px < MIN_DIMENSION_PX:
            violations.append(TOO_SMALL)
            messages.append(
                f"Image too small (minimum {MIN_DIMENSION_PX}x{MIN_DIMENSION_PX} pixels)"
            )

        if descriptor.format not in SUPPORTED_FORMATS:
            violations.append(UNSUPPORTED_FORMAT)
            messages.append(f"Unsupported format: {raw_format or 'unknown'}")

        return self._report(violations, messages, descriptor=descriptor)

    @staticmethod
    def _report(
        violations: list[str],
        messages: list[str],
        descriptor: ImageDescriptor | None,
    ) -> QualityReport:
        return QualityReport(
            is_valid=not violations,
            violations=violations,
            messages=messages,
            suggestions=[_SUGGESTIONS[v] for v in violations],
            descriptor=descriptor,
        )
