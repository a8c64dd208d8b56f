"""JSON logging for the Lambda functions

Each Lambda package calls `initialize_logging()` from its `__init__.py`, so the
root logger is configured before any handler module logs. Every record becomes
one JSON line on stdout, which CloudWatch stores as-is:

    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "urlshortener.lambdas.shorten_url.app",
     "message": "Shortened URL. Responding with 200.",
     "event": "SHORTEN_SUCCESS", "shortcode": "abc123"}

Keys passed through `extra=` are copied to the top level, so handlers tag
records with an `event` code that log queries can filter on.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV


# Attributes every LogRecord carries; anything else was passed via `extra`
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime', 'taskName'}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # extras may hold datetimes, timedeltas or enums
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Send every record to stdout through JsonFormatter

    Args:
        level (str | None):
            Root log level. Falls back to LOG_LEVEL, then INFO.
    """
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'root': {
                'level': (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper(),
                'handlers': ['stdout'],
            },
        }
    )
