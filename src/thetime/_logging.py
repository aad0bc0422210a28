"""Log formatting and root-logger configuration for the CLI.

Library modules only *emit* records through
``logging.getLogger(__name__)``.  Applications decide where records go.
The ``thetime`` command line calls :func:`configure_logging` once at
startup with the settings it loaded.

Records about a time reading carry structured context in ``extra``::

    logger.warning(
        "NTP unavailable, using the system clock: %s",
        exc,
        extra={"server": "pool.ntp.org", "provenance": "system"},
    )

The recognised keys are listed in :data:`CONTEXT_FIELDS`.  Both
formatters render them: the text format as trailing ``key=value``
pairs, the JSON format as top-level fields.  Timestamps are stamped
with thetime's own RFC 3339 rendering, always in UTC with milliseconds.
"""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

from thetime._settings import LoggingSettings
from thetime._system import System

_BYTES_PER_MB = 1024 * 1024

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

CONTEXT_FIELDS: tuple[str, ...] = ("server", "provenance", "round_trip_ms")
"""``extra`` keys describing where a reading came from and how long it took."""


def _reading_context(record: logging.LogRecord) -> dict[str, Any]:
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}


def _record_timestamp(record: logging.LogRecord) -> str:
    return System.from_unix_milliseconds(int(record.created * 1000)).rfc3339()


class TextFormatter(logging.Formatter):
    """``asctime [LEVEL] logger: message`` plus reading context.

    Example line::

        2024-01-05 14:46:29,120 [WARNING] thetime._ntp: NTP unavailable,
        using the system clock: timed out server=pool.ntp.org provenance=system
    """

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _reading_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects.

    Fields: ``timestamp`` (RFC 3339, UTC, milliseconds), ``level``,
    ``logger``, ``message``, ``service``, then any
    :data:`CONTEXT_FIELDS` set on the record, ``version`` when set and
    ``exception`` when present.

    Args:
        service: Name included in every line.
        version: Version string.  Omitted from output when empty.
    """

    def __init__(self, *, service: str = "", version: str = "") -> None:
        super().__init__()
        self._service = service
        self._version = version

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _record_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self._service,
            **_reading_context(record),
        }
        if self._version:
            entry["version"] = self._version
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    settings: LoggingSettings,
    *,
    service: str,
    version: str = "",
) -> None:
    """Route every record to stderr, and to a rotating file if configured.

    Handlers already on the root logger are replaced, so calling this
    twice does not duplicate output.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    formatter: logging.Formatter
    if settings.format == "json":
        formatter = JsonFormatter(service=service, version=version)
    else:
        formatter = TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.file is not None:
        handlers.append(
            RotatingFileHandler(
                settings.file,
                maxBytes=settings.max_file_size_mb * _BYTES_PER_MB,
                backupCount=settings.backup_count,
            ),
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(settings.level)
