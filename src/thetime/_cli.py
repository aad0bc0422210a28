"""Command-line interface (Typer-based).

Provides :func:`build_cli`, which constructs the ``thetime`` Typer app,
and :func:`main`, the console-script entry point.

Global options (``--log-level``, ``--log-format``, ``--env-file``,
``--version``) are handled by the callback, which loads
:class:`~thetime._settings.Settings`, configures logging and stores the
settings on the Typer context for the subcommands::

    thetime now --source ntp --server time.google.com
    thetime convert 3787310789 --from mac-os --to unix
    thetime duration 93784
    thetime tz +05:30
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Annotated, get_args

import typer
from pydantic import ValidationError

from thetime._errors import TimeError
from thetime._logging import configure_logging
from thetime._ntp import Ntp
from thetime._settings import LoggingSettings, Settings
from thetime._system import System
from thetime._time import PRETTY_FORMAT, TimeOps, format_duration
from thetime._timezones import Tz

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 3

# ---------------------------------------------------------------------------
# Allowed values (extracted from LoggingSettings Literal types)
# ---------------------------------------------------------------------------

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["level"].annotation,
)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["format"].annotation,
)


class Source(StrEnum):
    SYSTEM = "system"
    NTP = "ntp"


class EpochUnit(StrEnum):
    """Integer timestamp flavours understood by ``convert``."""

    UNIX = "unix"
    UNIX_MS = "unix-ms"
    WINDOWS = "windows"
    WEBKIT = "webkit"
    MAC_OS = "mac-os"
    MAC_OS_ABSOLUTE = "mac-os-absolute"
    SAS_4GL = "sas-4gl"
    RFC3339 = "rfc3339"


_READERS: dict[EpochUnit, Callable[[int], System]] = {
    EpochUnit.UNIX: System.from_unix_seconds,
    EpochUnit.UNIX_MS: System.from_unix_milliseconds,
    EpochUnit.WINDOWS: System.from_windows_ticks,
    EpochUnit.WEBKIT: System.from_webkit_microseconds,
    EpochUnit.MAC_OS: System.from_mac_os_seconds,
    EpochUnit.MAC_OS_ABSOLUTE: System.from_mac_os_absolute_seconds,
    EpochUnit.SAS_4GL: System.from_sas4gl_seconds,
}

_WRITERS: dict[EpochUnit, Callable[[System], int | str]] = {
    EpochUnit.UNIX: System.to_unix_seconds,
    EpochUnit.UNIX_MS: System.to_unix_milliseconds,
    EpochUnit.WINDOWS: System.to_windows_ticks,
    EpochUnit.WEBKIT: System.to_webkit_microseconds,
    EpochUnit.MAC_OS: System.to_mac_os_seconds,
    EpochUnit.MAC_OS_ABSOLUTE: System.to_mac_os_absolute_seconds,
    EpochUnit.SAS_4GL: System.to_sas4gl_seconds,
    EpochUnit.RFC3339: System.rfc3339,
}


# Lets "-05:00" or "-1" reach a positional argument instead of being read
# as an unknown short option.
_SIGNED_ARGUMENT = {"ignore_unknown_options": True}


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(EXIT_RUNTIME_ERROR)


def build_cli() -> typer.Typer:
    """Construct the ``thetime`` Typer app."""
    from thetime import __version__

    cli = typer.Typer(
        help=f"thetime v{__version__} — system and NTP time with epoch conversions",
    )

    # -- global options ------------------------------------------------------

    @cli.callback(invoke_without_command=True)
    def main(
        ctx: typer.Context,
        version_flag: Annotated[
            bool | None,
            typer.Option("--version", is_eager=True, help="Show version and exit."),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override log format."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
    ) -> None:
        if version_flag:
            typer.echo(f"thetime v{__version__}")
            raise typer.Exit()

        if log_level is not None and log_level.upper() not in _VALID_LOG_LEVELS:
            raise typer.BadParameter(
                f"Invalid log level '{log_level}'. "
                f"Choose from: {', '.join(_VALID_LOG_LEVELS)}",
                param_hint="'--log-level'",
            )

        if log_format is not None and log_format.lower() not in _VALID_LOG_FORMATS:
            raise typer.BadParameter(
                f"Invalid log format '{log_format}'. "
                f"Choose from: {', '.join(_VALID_LOG_FORMATS)}",
                param_hint="'--log-format'",
            )

        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as exc:
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc

        if log_level is not None:
            settings.logging = settings.logging.model_copy(
                update={"level": log_level.upper()},
            )
        if log_format is not None:
            settings.logging = settings.logging.model_copy(
                update={"format": log_format.lower()},
            )

        configure_logging(settings.logging, service="thetime", version=__version__)
        logger.debug("Settings loaded (env file %s)", env_file)
        ctx.obj = settings

        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit()

    # -- commands ------------------------------------------------------------

    @cli.command()
    def now(
        ctx: typer.Context,
        source: Annotated[
            Source,
            typer.Option("--source", "-s", help="Where to read the time from."),
        ] = Source.SYSTEM,
        server: Annotated[
            str | None,
            typer.Option("--server", help="NTP server (overrides THETIME_NTP__SERVER)."),
        ] = None,
        fmt: Annotated[
            str,
            typer.Option("--format", "-f", help="strftime pattern."),
        ] = PRETTY_FORMAT,
        tz: Annotated[
            str | None,
            typer.Option("--tz", help="Render in this ±HH:MM offset."),
        ] = None,
    ) -> None:
        """Print the current time and where it came from."""
        settings: Settings = ctx.obj
        try:
            value: TimeOps = (
                Ntp.now(server, settings=settings.ntp) if source is Source.NTP else System.now()
            )
            if tz is not None:
                value = value.change_timezone(tz)
            typer.echo(f"{value.format(fmt)}\t{value.provenance}")
        except TimeError as exc:
            raise _fail(exc) from exc

    @cli.command(context_settings=_SIGNED_ARGUMENT)
    def convert(
        value: Annotated[int, typer.Argument(help="Integer timestamp to convert.")],
        from_unit: Annotated[
            EpochUnit,
            typer.Option("--from", help="Epoch of VALUE."),
        ] = EpochUnit.UNIX,
        to_unit: Annotated[
            EpochUnit,
            typer.Option("--to", help="Epoch to convert to."),
        ] = EpochUnit.RFC3339,
    ) -> None:
        """Convert an integer timestamp between epochs."""
        reader = _READERS.get(from_unit)
        if reader is None:
            raise typer.BadParameter(
                f"'{from_unit}' can only be used with --to",
                param_hint="'--from'",
            )
        try:
            typer.echo(_WRITERS[to_unit](reader(value)))
        except TimeError as exc:
            raise _fail(exc) from exc

    @cli.command(context_settings=_SIGNED_ARGUMENT)
    def duration(
        seconds: Annotated[int, typer.Argument(min=0, help="Length in seconds.")],
    ) -> None:
        """Render a number of seconds as weeks, days, hours, minutes, seconds."""
        typer.echo(format_duration(seconds))

    @cli.command(context_settings=_SIGNED_ARGUMENT)
    def tz(
        query: Annotated[str, typer.Argument(help="Zone name (e.g. 'BST/CET') or ±HH:MM.")],
    ) -> None:
        """Look up a zone in the static offset table.

        QUERY is a display name such as BST/CET, or an offset such as
        +05:30 or -03:30.
        """
        try:
            zone = Tz.from_offset_str(query) if query[:1] in "+-" else Tz.from_name(query)
        except TimeError as exc:
            raise _fail(exc) from exc
        if zone is None:
            raise _fail(LookupError(f"No zone in the table matches {query!r}"))
        typer.echo(f"{zone.zone_name}\t{zone.offset_str}")

    return cli


def main() -> None:
    """Console-script entry point."""
    build_cli()()
