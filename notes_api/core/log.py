"""Logging setup: console output plus request, audit and error log files.

Every record is stamped with the correlation id of the request being served
(``-`` outside a request).
"""

import logging
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notes_api.core.config import Settings

REQUEST_LOGGER = "notes_api.requests"
AUDIT_LOGGER = "notes_api.audit"
ERROR_LOGGER = "notes_api.errors"

# Logger name -> file name inside LOG_DIR.
LOG_FILES = {
    REQUEST_LOGGER: "reqLog.log",
    AUDIT_LOGGER: "authLog.log",
    ERROR_LOGGER: "errLog.log",
}

LOG_FORMAT = "%(asctime)s\t%(request_id)s\t%(levelname)s\t%(name)s\t%(message)s"
FILE_FORMAT = "%(asctime)s\t%(request_id)s\t%(message)s"
DATE_FORMAT = "%Y%m%d\t%H:%M:%S"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_configured = False


class RequestIdFilter(logging.Filter):
    """Attach the current request id to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def set_request_id(request_id: str | None) -> None:
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    return request_id_var.get()


def configure_logging(settings: "Settings") -> None:
    """Install handlers once per process; later calls only adjust the level."""
    global _configured
    root = logging.getLogger("notes_api")
    root.setLevel(settings.LOG_LEVEL)
    if _configured:
        return

    console = logging.StreamHandler()
    console.addFilter(RequestIdFilter())
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)

    log_dir = Path(settings.LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        root.warning("Log directory %s unavailable, file logs disabled: %s", log_dir, e)
    else:
        for logger_name, file_name in LOG_FILES.items():
            handler = logging.FileHandler(log_dir / file_name, encoding="utf-8", delay=True)
            handler.addFilter(RequestIdFilter())
            handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            logging.getLogger(logger_name).addHandler(handler)

    _configured = True


def audit(message: str) -> None:
    """Write one line to the authentication audit log."""
    logging.getLogger(AUDIT_LOGGER).warning(message)
