from pathlib import Path

from civicscan.processor.exceptions import ImageFileNotFoundError


class FileLoader:
    """Reads an uploaded image from local disk."""

    def load(self, path: Path) -> bytes:
        """Read image bytes.

        Raises:
            ImageFileNotFoundError: if nothing exists at the path.
        """
        if not path.is_file():
            raise ImageFileNotFoundError(
                f"Image file not found: {path}",
                suggestions=["Please try uploading the image again"],
            )
        return path.read_bytes()
