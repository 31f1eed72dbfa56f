"""logfmt output for the connector's own loggers.

The connector runs inside a host process, so :func:`setup_logging` only
touches the ``sqlew_connector`` logger tree and leaves the root logger alone.
"""

import logging
from typing import Any, Optional

from .errors import ApiError

CONNECTOR_LOGGER = "sqlew_connector"

LOG_EXTRA_FIELDS = (
    "method",
    "path",
    "status",
    "duration_ms",
    "tool",
    "action",
    "attempt",
    "delay_ms",
    "retry_after",
    "code",
)


class LogfmtFormatter(logging.Formatter):
    """
    logfmt lines with request extras.
    When a record carries an ApiError (logger.exception / exc_info=err), its
    code, status and retry_after are rendered unless extras already set them.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields = {key: getattr(record, key, None) for key in LOG_EXTRA_FIELDS}
        error = self._api_error(record)
        if error is not None:
            fields["code"] = fields["code"] or error.code
            if fields["status"] is None:
                fields["status"] = error.status_code
            fields["retry_after"] = fields["retry_after"] or error.retry_after

        kv = [f"level={record.levelname.lower()}", f"logger={record.name}"]
        msg = record.getMessage()
        if msg:
            kv.append(f"event={self._fmt_val(msg)}")
        kv.extend(
            f"{key}={self._fmt_val(val)}"
            for key, val in fields.items()
            if val is not None
        )

        if record.exc_info and record.exc_info[0] is not None and error is None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")
        return " ".join(kv)

    @staticmethod
    def _api_error(record: logging.LogRecord) -> Optional[ApiError]:
        if record.exc_info and isinstance(record.exc_info[1], ApiError):
            return record.exc_info[1]
        return None

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        s = str(val)
        if " " in s or "=" in s:
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: str = "INFO", logger_name: str = CONNECTOR_LOGGER) -> None:
    """Attach one logfmt handler to the connector logger; safe to call twice."""

    log = logging.getLogger(logger_name)
    for h in list(log.handlers):
        if isinstance(h.formatter, LogfmtFormatter):
            log.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    log.addHandler(handler)
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    # host handlers on the root logger would print every line twice
    log.propagate = False


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS", "CONNECTOR_LOGGER"]
