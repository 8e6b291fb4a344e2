import logging

from app.core import logging as logging_setup


def test_configure_logging_installs_handler_once():
    root = logging.getLogger()
    original_level = root.level
    try:
        logging_setup.configure_logging("DEBUG")
        logging_setup.configure_logging("warning")
        assert root.handlers.count(logging_setup._handler) == 1
        assert root.level == logging.WARNING
    finally:
        root.removeHandler(logging_setup._handler)
        root.setLevel(original_level)


def test_unknown_level_falls_back_to_info():
    root = logging.getLogger()
    original_level = root.level
    try:
        logging_setup.configure_logging("chatty")
        assert root.level == logging.INFO
    finally:
        root.removeHandler(logging_setup._handler)
        root.setLevel(original_level)
