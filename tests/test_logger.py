"""Tests for the logging setup module."""

import logging

from receipt_ocr.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def teardown_method(self) -> None:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.NOTSET)
        logging.getLogger("multipart").setLevel(logging.NOTSET)

    def test_setup_creates_handler(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("DEBUG")
        assert len(root.handlers) >= 1
        assert root.level == logging.DEBUG

        # Cleanup
        root.handlers.clear()

    def test_setup_idempotent(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("INFO")
        count = len(root.handlers)
        setup_logging("INFO")
        assert len(root.handlers) == count

        root.handlers.clear()

    def test_setup_invalid_level_defaults_to_info(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("NONEXISTENT")
        assert root.level == logging.INFO

        root.handlers.clear()

    def test_noisy_libraries_quieted(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("DEBUG")
        assert logging.getLogger("PIL").level == logging.INFO
        assert logging.getLogger("multipart").level == logging.INFO

        root.handlers.clear()

    def test_noisy_libraries_follow_higher_level(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("WARNING")
        assert logging.getLogger("PIL").level == logging.WARNING

        root.handlers.clear()

    def test_existing_handlers_left_alone(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()
        handler = logging.NullHandler()
        root.addHandler(handler)

        setup_logging("DEBUG")
        assert root.handlers == [handler]

        root.handlers.clear()


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("receipt_ocr.test")
        assert logger.name == "receipt_ocr.test"
        assert isinstance(logger, logging.Logger)

    def test_same_name_returns_same_logger(self) -> None:
        assert get_logger("test.same") is get_logger("test.same")
