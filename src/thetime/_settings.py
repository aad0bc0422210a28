"""Configuration via pydantic-settings.

Configuration is loaded from environment variables and/or ``.env``
files.  All variables carry the ``THETIME_`` prefix and nested models
use ``__`` as the delimiter, e.g. ``THETIME_NTP__SERVER=time.google.com``.

The schema covers two concerns:

* **NTP** — which server to query and how long to wait for it.
* **Logging** — level, format, optional file sink, rotation.

Library calls never read the environment on their own: the
:class:`~thetime.Ntp` source takes an :class:`NtpSettings` argument and
falls back to the model defaults.  Only the CLI builds the root
:class:`Settings` from the environment.

All durations are in **seconds**.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from thetime._constants import DEFAULT_NTP_SERVER, NTP_PORT, NTP_TIMEOUT

# -------------------------------------------------------------------
# Sub-models (BaseModel, NOT BaseSettings — nested via composition)
# -------------------------------------------------------------------


class NtpSettings(BaseModel):
    """NTP query configuration.

    Environment variables (with ``__`` nesting)::

        THETIME_NTP__SERVER=time.cloudflare.com
        THETIME_NTP__PORT=123
        THETIME_NTP__TIMEOUT=2.5
    """

    server: str = Field(
        default=DEFAULT_NTP_SERVER,
        min_length=1,
        description="NTP server host name or IP address.",
    )
    port: Annotated[int, Field(ge=1, le=65535)] = Field(
        default=NTP_PORT,
        description="UDP port of the NTP server.",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=NTP_TIMEOUT,
        description=(
            "Seconds to block waiting for the response before "
            "falling back to the system clock."
        ),
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    When ``file`` is set, logs are also written to a rotating file
    (``max_file_size_mb`` per file, ``backup_count`` generations kept).
    When ``None``, logs go to stderr only.

    The ``format`` field selects the output format:

    - ``"text"`` (default) — human-readable timestamped lines.
    - ``"json"`` — structured JSON lines for log aggregators.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format, 'json' or 'text'.",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path. ``None`` means stderr only.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description="Maximum log file size in megabytes before rotation.",
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Number of rotated log files to keep.",
    )


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root settings for the ``thetime`` command-line tool.

    Example ``.env``::

        THETIME_NTP__SERVER=time.google.com
        THETIME_NTP__TIMEOUT=2
        THETIME_LOGGING__LEVEL=DEBUG
        THETIME_LOGGING__FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="THETIME_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    """``extra="ignore"`` lets a shared ``.env`` file carry variables
    meant for other tools without failing validation.
    """

    ntp: NtpSettings = Field(
        default_factory=NtpSettings,
        description="NTP query settings.",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )
