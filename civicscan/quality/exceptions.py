class QualityError(Exception):
    """Base exception for local image inspection errors."""


class ImageDecodeError(QualityError):
    """Raised when image bytes cannot be decoded into pixels."""
