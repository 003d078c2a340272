"""
Logging setup for the httpmessage package.

The library only ever calls logging.getLogger(__name__); nothing is
configured on import. Applications that want to see what the library does
call setup_logging() once, or attach their own handlers to the
"httpmessage" logger:

    logging.getLogger("httpmessage").setLevel(logging.DEBUG)
    logging.getLogger("httpmessage.http.uploaded_file").addHandler(handler)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import MessageConfig


LOGGER_NAME = "httpmessage"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """
    Format each record as one JSON object per line.

    Better for log aggregators (ELK, Datadog) than free text.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    config: Optional[MessageConfig] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configure the httpmessage logger based on config.

    Args:
        config: Logging settings; defaults to MessageConfig()
        handler: Handler to install; defaults to a stderr StreamHandler

    Returns:
        The configured "httpmessage" logger
    """
    config = config or MessageConfig()
    config.validate()

    level = getattr(logging, config.log_level.upper(), logging.WARNING)

    if handler is None:
        handler = logging.StreamHandler()

    if config.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
