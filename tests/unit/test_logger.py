import io
import logging

from civicscan.logging.logger import Log


class TestRedact:
    def test_masks_every_occurrence(self) -> None:
        text = "url?api_key=abc123 and header Bearer abc123"
        assert Log.redact(text, "abc123") == "url?api_key=*** and header Bearer ***"

    def test_empty_secret_leaves_text_unchanged(self) -> None:
        assert Log.redact("nothing to hide", "") == "nothing to hide"


class TestConfigure:
    def test_writes_to_given_stream(self) -> None:
        logger = logging.getLogger("civicscan")
        saved = list(logger.handlers)
        logger.handlers.clear()
        stream = io.StringIO()
        try:
            Log.configure("debug", stream=stream)
            Log.debug("pipeline started")
            assert "pipeline started" in stream.getvalue()
            assert "[DEBUG]" in stream.getvalue()
        finally:
            logger.handlers[:] = saved


class TestLevels:
    def test_each_method_logs_at_its_level(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="civicscan"):
            Log.debug("d")
            Log.info("i")
            Log.warning("w")
            Log.error("e")
        assert [(r.levelname, r.getMessage()) for r in caplog.records] == [
            ("DEBUG", "d"),
            ("INFO", "i"),
            ("WARNING", "w"),
            ("ERROR", "e"),
        ]
