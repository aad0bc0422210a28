"""NTP time source — one UDP round trip to a time server.

Provides:

- :func:`build_request` / :func:`parse_transmit_seconds` — the wire codec.
- :class:`NtpTransport` (Protocol) and :class:`UdpTransport` — the
  network port and its production adapter.
- :class:`Ntp` — the time source.
- :class:`NtpRecord` — the stored form behind :meth:`Ntp.to_json`.
- :func:`now` — Unix seconds from :meth:`Ntp.now`.

Exchange, per call::

    client                                   server:123
      │  48 octets: 0x1B + 47 × 0x00  ──────────▶ │
      │ ◀──────────  ≥ 48 octets (transmit ts @40) │

Only the 32-bit seconds of the transmit timestamp (bytes 40–43,
big-endian, seconds since 1900-01-01) are read.  The server's
fractional field is ignored; the sub-second part is estimated as half
the locally measured round trip.  That is an approximation, not RFC 5905
clock synchronisation: there is a single sample, no filtering, no
retries and no alternate servers.

Failure handling:

- :meth:`Ntp.query` raises :class:`~thetime.NtpError` on any failure
  (resolution, send/receive error, timeout, empty or short response).
- :meth:`Ntp.now` never raises it.  It logs a warning and returns a
  system-clock reading in UTC whose ``provenance`` is ``"system"``, so
  callers can detect the degraded accuracy via :attr:`Ntp.valid_server`.
"""

from __future__ import annotations

import logging
import socket
import struct
from dataclasses import dataclass
from typing import Annotated, Protocol, Self, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from thetime._clock import ClockPort, MonotonicClock
from thetime._constants import (
    MILLIS_PER_SECOND,
    NTP_CLIENT_MODE,
    NTP_PACKET_SIZE,
    NTP_RECV_BUFFER,
    NTP_TRANSMIT_OFFSET,
    OFFSET_1601,
    REF_TIME_1970,
)
from thetime._errors import NtpError, TimeParseError
from thetime._settings import NtpSettings
from thetime._system import System
from thetime._time import NTP_PROVENANCE_PREFIX, PROVENANCE_SYSTEM, TimeOps

logger = logging.getLogger(__name__)

_TRANSMIT_SECONDS = struct.Struct("!I")

# ---------------------------------------------------------------------------
# Wire codec
# ---------------------------------------------------------------------------


def build_request() -> bytes:
    """Return the 48-octet client request: ``0x1B`` then 47 zero bytes."""
    return bytes([NTP_CLIENT_MODE]) + bytes(NTP_PACKET_SIZE - 1)


def parse_transmit_seconds(data: bytes) -> int:
    """Extract the transmit timestamp from a response as Unix seconds.

    Raises:
        NtpError: If the response is empty, too short to hold the
            transmit field, or carries a timestamp before 1970 (an
            unsynchronised server answers with zero).
    """
    if not data:
        msg = "Empty NTP response"
        raise NtpError(msg)
    end = NTP_TRANSMIT_OFFSET + _TRANSMIT_SECONDS.size
    if len(data) < end:
        msg = f"NTP response too short: {len(data)} bytes, need at least {end}"
        raise NtpError(msg)

    (ntp_seconds,) = _TRANSMIT_SECONDS.unpack_from(data, NTP_TRANSMIT_OFFSET)
    # Era 0 only: the 32-bit seconds field wraps on 2036-02-07, after which
    # every genuine reply lands here and falls back to the system clock.
    if ntp_seconds < REF_TIME_1970:
        msg = f"NTP transmit timestamp {ntp_seconds} precedes 1970; server not synchronised?"
        raise NtpError(msg)
    return ntp_seconds - REF_TIME_1970


# ---------------------------------------------------------------------------
# Transport port and adapter
# ---------------------------------------------------------------------------


@runtime_checkable
class NtpTransport(Protocol):
    """One datagram request/response exchange.

    Implementations raise :class:`OSError` (including
    :class:`TimeoutError`) on failure and return the raw response
    bytes otherwise.
    """

    def exchange(self, request: bytes, server: str, port: int, timeout: float) -> bytes: ...


class UdpTransport:
    """Production transport over an ephemeral UDP socket.

    The socket lives for exactly one exchange and is closed on every
    path, success or failure.
    """

    def exchange(self, request: bytes, server: str, port: int, timeout: float) -> bytes:
        try:
            family, _, _, _, address = socket.getaddrinfo(server, port, 0, socket.SOCK_DGRAM)[0]
        except UnicodeError as exc:
            # IDNA encoding rejects empty or over-long labels before any lookup.
            msg = f"Invalid NTP server name {server!r}: {exc}"
            raise OSError(msg) from exc
        with socket.socket(family, socket.SOCK_DGRAM) as sock:
            sock.settimeout(timeout)
            sock.sendto(request, address)
            data, _ = sock.recvfrom(NTP_RECV_BUFFER)
        return data


# ---------------------------------------------------------------------------
# Stored form
# ---------------------------------------------------------------------------


class NtpRecord(BaseModel):
    """Serialised form of an :class:`Ntp` reading.

    Carries the stored fields verbatim, so a reading saved with
    :meth:`Ntp.to_json` restores with the same instant, offset and
    server tag::

        {"seconds_since_1601": 13127702400, "subsec_milliseconds": 125,
         "utc_offset": 0, "provenance": "ntp:pool.ntp.org"}
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    seconds_since_1601: Annotated[int, Field(ge=0)]
    subsec_milliseconds: Annotated[int, Field(ge=0, le=999)]
    utc_offset: Annotated[int, Field(gt=-86400, lt=86400)] = 0
    provenance: str = PROVENANCE_SYSTEM


# ---------------------------------------------------------------------------
# Time source
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Ntp(TimeOps):
    """Time as reported by an NTP server.

    Values produced by a successful exchange carry the provenance
    ``"ntp:<server>"`` and a UTC offset of zero.  Values produced any
    other way (fallback, parsing, integer constructors, arithmetic on
    those) carry a different tag.

    Usage::

        t = Ntp.now()
        if not t.valid_server:
            log.info("using system time, NTP unavailable")
        print(t.rfc3339())
    """

    seconds_since_1601: int
    subsec_milliseconds: int
    utc_offset: int = 0
    provenance: str = PROVENANCE_SYSTEM

    @property
    def server(self) -> str | None:
        """The server the value was fetched from, or ``None``."""
        if self.provenance.startswith(NTP_PROVENANCE_PREFIX):
            return self.provenance[len(NTP_PROVENANCE_PREFIX) :]
        return None

    @property
    def valid_server(self) -> bool:
        """Whether the value came from a real NTP exchange."""
        return self.server is not None

    # -- persistence ---------------------------------------------------------

    def to_record(self) -> NtpRecord:
        return NtpRecord(
            seconds_since_1601=self.seconds_since_1601,
            subsec_milliseconds=self.subsec_milliseconds,
            utc_offset=self.utc_offset,
            provenance=self.provenance,
        )

    def to_json(self) -> str:
        """Serialise the reading, server tag included."""
        return self.to_record().model_dump_json()

    @classmethod
    def from_record(cls, record: NtpRecord) -> Self:
        return cls(**record.model_dump())

    @classmethod
    def from_json(cls, data: str | bytes) -> Self:
        """Restore a reading written by :meth:`to_json`.

        Raises:
            TimeParseError: If *data* is not a valid stored reading.
        """
        try:
            record = NtpRecord.model_validate_json(data)
        except ValidationError as exc:
            text = data.decode(errors="replace") if isinstance(data, bytes) else data
            msg = f"Invalid stored NTP reading: {exc}"
            raise TimeParseError(msg, text=text) from exc
        return cls.from_record(record)

    @classmethod
    def query(
        cls,
        server: str | None = None,
        *,
        settings: NtpSettings | None = None,
        transport: NtpTransport | None = None,
        clock: ClockPort | None = None,
    ) -> Self:
        """Fetch the time from *server* (default: ``settings.server``).

        Raises:
            NtpError: On any network or protocol failure.
        """
        settings = settings or NtpSettings()
        host = server or settings.server
        transport = transport or UdpTransport()
        clock = clock or MonotonicClock()

        started = clock.now()
        try:
            response = transport.exchange(build_request(), host, settings.port, settings.timeout)
        except OSError as exc:
            msg = f"NTP exchange with {host}:{settings.port} failed: {exc}"
            raise NtpError(msg, server=host) from exc
        elapsed = clock.now() - started

        try:
            unix_seconds = parse_transmit_seconds(response)
        except NtpError as exc:
            msg = f"{exc} (from {host})"
            raise NtpError(msg, server=host) from exc
        round_trip_ms = max(0, int(elapsed * MILLIS_PER_SECOND))
        logger.debug(
            "NTP %s answered %d",
            host,
            unix_seconds,
            extra={"server": host, "round_trip_ms": round_trip_ms},
        )
        one_way_ms = round_trip_ms // 2
        return cls.from_epoch_offset(
            (unix_seconds + OFFSET_1601) * MILLIS_PER_SECOND + one_way_ms,
            0,
            provenance=f"{NTP_PROVENANCE_PREFIX}{host}",
        )

    @classmethod
    def now(
        cls,
        server: str | None = None,
        *,
        settings: NtpSettings | None = None,
        transport: NtpTransport | None = None,
        clock: ClockPort | None = None,
    ) -> Self:
        """Fetch the time, falling back to the system clock on failure.

        Never raises :class:`~thetime.NtpError`.  The fallback reading
        is expressed in UTC and tagged ``"system"``.
        """
        try:
            return cls.query(server, settings=settings, transport=transport, clock=clock)
        except NtpError as exc:
            logger.warning(
                "NTP unavailable, using the system clock: %s",
                exc,
                extra={"server": exc.server, "provenance": PROVENANCE_SYSTEM},
            )
        return cls.from_epoch_offset(System.now().raw, 0, provenance=PROVENANCE_SYSTEM)


def now() -> int:
    """Current Unix time in seconds, from NTP with system fallback."""
    return Ntp.now().to_unix_seconds()
