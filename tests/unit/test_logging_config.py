import json
import logging
import sys

import pytest
import structlog

from token_search.logging_config import HANDLER_NAME, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def test_logs_render_as_json_on_stderr(capsys):
    handler = setup_logging("INFO", "stderr", "json")

    assert handler.stream is sys.stderr
    logging.getLogger("token_search.test").info("Token list initialized with 3 tokens")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "Token list initialized with 3 tokens"
    assert record["level"] == "info"
    assert record["logger"] == "token_search.test"
    assert record["server"] == "TokenSearch"


def test_stdout_can_be_selected():
    handler = setup_logging("INFO", "stdout", "json")

    assert handler.stream is sys.stdout


def test_setup_is_idempotent():
    setup_logging("INFO", "stderr", "json")
    setup_logging("DEBUG", "stderr", "auto")

    ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_noisy_loggers_are_quieted():
    setup_logging("DEBUG", "stderr", "console")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
