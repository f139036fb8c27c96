from pathlib import Path

import pytest

from civicscan.processor.exceptions import ImageFileNotFoundError
from civicscan.processor.file_loader import FileLoader


class TestLoadReturnsBytes:
    def test_returns_file_contents(self, tmp_path: Path) -> None:
        image = tmp_path / "pothole.jpg"
        image.write_bytes(b"\xff\xd8\xff fake jpeg")

        assert FileLoader().load(image) == b"\xff\xd8\xff fake jpeg"


class TestLoadRaisesWhenFileMissing:
    def test_raises_for_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ImageFileNotFoundError, match="missing.jpg") as exc_info:
            FileLoader().load(tmp_path / "missing.jpg")
        assert exc_info.value.stage == "input_error"
        assert exc_info.value.suggestions

    def test_raises_for_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ImageFileNotFoundError):
            FileLoader().load(tmp_path)
