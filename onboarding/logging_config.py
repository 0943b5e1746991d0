"""JSON logging for the onboarding service.

``setup_logging`` installs a single stdout handler with python-json-logger's
``JsonFormatter`` on the ``onboarding`` logger. ``RequestIdFilter`` adds the
current request id to every record so ``%(request_id)s`` always resolves.
"""

import logging
import sys
from logging import Filter, LogRecord

from pythonjsonlogger import jsonlogger

from onboarding import settings
from onboarding.middleware import REQUEST_ID_CTX

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    The value comes from ``REQUEST_ID_CTX``; outside a request it is ``-``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the ``onboarding`` logger once and return it."""
    logger = logging.getLogger("onboarding")
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
        h.addFilter(RequestIdFilter())
        logger.addHandler(h)
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logger
