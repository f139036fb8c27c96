import io

import numpy as np
from PIL import Image

from civicscan.logging.logger import Log
from civicscan.quality.exceptions import ImageDecodeError
from civicscan.quality.models import BlanknessReport

BLANK_VARIANCE_THRESHOLD = 50.0

_LEVELS = np.arange(256, dtype=np.float64)


class BlankDetector:
    """Flags visually flat images (lens cap, solid fill) by intensity variance."""

    def detect(self, image_bytes: bytes) -> BlanknessReport:
        """Compute mean and population variance over every grayscale pixel.

        Both moments come from the 256-bin intensity histogram, so memory
        does not grow with the pixel count beyond the decoded image itself.

        Raises:
            ImageDecodeError: if the bytes cannot be decoded.
        """
        counts = self._load_histogram(image_bytes)
        total = counts.sum()
        average = float((counts * _LEVELS).sum() / total)
        variance = float((counts * (_LEVELS - average) ** 2).sum() / total)

        is_blank = variance < BLANK_VARIANCE_THRESHOLD
        if is_blank:
            confidence = (BLANK_VARIANCE_THRESHOLD - variance) / BLANK_VARIANCE_THRESHOLD
        else:
            confidence = 1 - variance / 1000

        Log.info(f"Image content analysis: avg_intensity={average:.2f} variance={variance:.2f}")
        return BlanknessReport(
            is_blank=is_blank,
            average_intensity=average,
            variance=variance,
            confidence=confidence,
        )

    @staticmethod
    def _load_histogram(image_bytes: bytes) -> np.ndarray:
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                counts = img.convert("L").histogram()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(f"Unable to decode image pixels: {exc}") from exc
        histogram = np.asarray(counts, dtype=np.float64)
        if histogram.sum() == 0:
            raise ImageDecodeError("Unable to decode image pixels: image has no pixels")
        return histogram
