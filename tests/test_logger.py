import logging

from proffinder.core.logger import get_logger, setup_logger


def test_setup_logger_writes_to_file_at_env_level(tmp_path, monkeypatch):
    monkeypatch.setenv("PROFFINDER_LOG_LEVEL", "warning")
    log_file = tmp_path / "logs" / "proffinder.log"
    logger = setup_logger("proffinder.test_file", log_file=log_file)

    assert logger.level == logging.WARNING
    assert get_logger("proffinder.test_file") is logger
    logger.info("hidden")
    logger.warning("skipped a malformed line")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "skipped a malformed line" in text
    assert "hidden" not in text
    logger.handlers.clear()


def test_setup_logger_replaces_previous_handlers():
    setup_logger("proffinder.test_twice", level="DEBUG")
    logger = setup_logger("proffinder.test_twice", level="DEBUG")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    logger.handlers.clear()
