INPUT_ERROR_STAGE = "input_error"
QUALITY_STAGE = "quality_validation"
BLANK_STAGE = "blank_detection"


class AssessmentRejection(Exception):
    """Base exception for images the pipeline refuses to assess.

    Carries the stage that rejected the image and remediation suggestions
    so the processor can turn it into a structured result.
    """

    stage: str = INPUT_ERROR_STAGE

    def __init__(self, reason: str, suggestions: list[str] | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.suggestions = list(suggestions or [])


class InputError(AssessmentRejection):
    """Raised when the input itself is unusable."""


class UnreadableImageError(InputError):
    """Raised when the image bytes are corrupt or not an image."""


class ImageFileNotFoundError(InputError):
    """Raised when the image path given by the caller does not exist."""


class MissingImageUrlError(InputError):
    """Raised when the remote path is called without an image URL."""


class QualityRejected(AssessmentRejection):
    """Raised when the image is too small, too large or in an unsupported format."""

    stage = QUALITY_STAGE


class ContentRejected(AssessmentRejection):
    """Raised when the image is blank or has insufficient content."""

    stage = BLANK_STAGE
