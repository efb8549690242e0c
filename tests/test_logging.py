"""Tests for log formatting and setup."""

from __future__ import annotations

import logging

from social_network.core.logging import LOG_FORMAT, KeyValueFormatter, configure_logging
from social_network.core.settings import Settings


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "social_network.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_plain_record() -> None:
    line = KeyValueFormatter("%(levelname)s %(message)s").format(_record())
    assert line == "INFO hello world"


def test_extra_fields_appended_sorted() -> None:
    line = KeyValueFormatter("%(message)s").format(_record(path="/x", ip="1.2.3.4"))
    assert line == "hello world ip=1.2.3.4 path=/x"


def test_configure_logging(mocker) -> None:
    basic_config = mocker.patch("social_network.core.logging.logging.basicConfig")
    configure_logging(Settings(SECRET_KEY="k", LOG_LEVEL="warning", _env_file=None))

    basic_config.assert_called_once()
    kwargs = basic_config.call_args.kwargs
    assert kwargs["level"] == logging.WARNING
    assert kwargs["force"] is True
    [handler] = kwargs["handlers"]
    assert isinstance(handler.formatter, KeyValueFormatter)
    assert handler.formatter._fmt == LOG_FORMAT


def test_configure_logging_with_file(mocker, tmp_path) -> None:
    basic_config = mocker.patch("social_network.core.logging.logging.basicConfig")
    log_file = tmp_path / "app.log"
    configure_logging(Settings(SECRET_KEY="k", LOG_FILE=str(log_file), _env_file=None))

    handlers = basic_config.call_args.kwargs["handlers"]
    assert len(handlers) == 2
    assert isinstance(handlers[1], logging.FileHandler)
    for handler in handlers:
        handler.close()
