import logging

from stocksim.utils.logger import SimLogger, get_logger


def test_get_logger_returns_registered_instance():
    first = get_logger("tests.logger.registry", level="INFO")
    assert get_logger("tests.logger.registry") is first
    assert first.logger.level == logging.INFO


def test_get_logger_applies_level_to_registered_logger():
    logger = get_logger("tests.logger.level", level="DEBUG")
    assert logger.is_enabled_for("DEBUG")

    again = get_logger("tests.logger.level", level="WARNING")
    assert again is logger
    assert logger.logger.level == logging.WARNING
    assert not logger.is_enabled_for("INFO")

    # Without a level the current one is kept
    get_logger("tests.logger.level")
    assert logger.logger.level == logging.WARNING


def test_get_logger_adds_file_handler_to_registered_logger(tmp_path, monkeypatch):
    monkeypatch.setitem(SimLogger._global_config, "file_output", True)
    logger = get_logger("tests.logger.file", level="INFO")
    log_file = tmp_path / "logs" / "run.log"

    get_logger("tests.logger.file", log_file=str(log_file))
    logger.info("written to file")
    for handler in logger.logger.handlers:
        handler.flush()

    assert "written to file" in log_file.read_text()
