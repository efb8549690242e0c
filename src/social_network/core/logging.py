"""Logging configuration for the social network service.

Modules log through `logging.getLogger(__name__)`; structured context is passed
with `extra={...}` and rendered as trailing ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import sys

from social_network.core.settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s (%(name)s)"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes present on every LogRecord; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class KeyValueFormatter(logging.Formatter):
    """Formatter appending `extra` fields to the rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not fields:
            return line
        rendered = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{line} {rendered}"


def configure_logging(settings: Settings) -> None:
    """Install stdout (and optional file) handlers on the root logger.

    Args:
        settings: Application settings supplying `log_level` and `log_file`.
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    formatter = KeyValueFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Request logging middleware already covers access logs.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
