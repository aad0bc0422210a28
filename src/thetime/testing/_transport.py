"""Scripted NTP transport and response encoder.

:class:`FakeTransport` satisfies :class:`~thetime.NtpTransport`
without touching the network: it returns a canned response, or raises
a canned error, and records every call for later inspection.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from thetime._constants import NTP_PACKET_SIZE, NTP_TRANSMIT_OFFSET, REF_TIME_1970

_NTP_SERVER_MODE = 0x1C  # LI=0, VN=3, Mode=4 (server)

EPOCH_2017 = 1_483_228_800
"""2017-01-01 00:00:00 UTC in Unix seconds; the default fake answer."""


def build_ntp_response(unix_seconds: int = EPOCH_2017, *, fraction: int = 0) -> bytes:
    """Encode a 48-octet server response carrying *unix_seconds*.

    Only the mode octet and the transmit timestamp (seconds and
    fraction) are filled in; every other field is zero.
    """
    packet = bytearray(NTP_PACKET_SIZE)
    packet[0] = _NTP_SERVER_MODE
    struct.pack_into("!II", packet, NTP_TRANSMIT_OFFSET, unix_seconds + REF_TIME_1970, fraction)
    return bytes(packet)


@dataclass
class FakeTransport:
    """Test double for NtpTransport.

    Attributes:
        response: Bytes returned by ``exchange``.
        error: When set, raised by ``exchange`` instead of returning.
        calls: ``(request, server, port, timeout)`` for every call.
    """

    response: bytes = field(default_factory=build_ntp_response)
    error: OSError | None = None
    calls: list[tuple[bytes, str, int, float]] = field(default_factory=list)

    def exchange(self, request: bytes, server: str, port: int, timeout: float) -> bytes:
        self.calls.append((request, server, port, timeout))
        if self.error is not None:
            raise self.error
        return self.response
