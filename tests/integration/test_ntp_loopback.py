"""Integration tests — NTP over real UDP sockets on the loopback interface.

Exercises :class:`~thetime.UdpTransport` end to end against a tiny
in-process server thread: the request goes out on a real socket, the
response is decoded, and a silent server drives the timeout fallback.

Test Techniques Used:
    - Integration Testing: real sockets, no test doubles on the wire.
    - Fallback Testing: an unanswered request degrades to system time.
"""

from __future__ import annotations

import socket
import threading
from collections.abc import Iterator

import pytest

from thetime import Ntp, NtpError, NtpSettings, UdpTransport
from thetime._ntp import build_request
from thetime.testing import build_ntp_response

pytestmark = pytest.mark.integration

EPOCH_2017 = 1_483_228_800


class _LoopbackServer:
    """Answers a single datagram with a fixed NTP response."""

    def __init__(self, response: bytes | None) -> None:
        self.response = response
        self.received: list[bytes] = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(2.0)
        self.port: int = self.sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            data, address = self.sock.recvfrom(1024)
        except OSError:
            return
        self.received.append(data)
        if self.response is not None:
            self.sock.sendto(self.response, address)

    def __enter__(self) -> _LoopbackServer:
        self._thread.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._thread.join(timeout=3.0)
        self.sock.close()


@pytest.fixture
def answering_server() -> Iterator[_LoopbackServer]:
    with _LoopbackServer(build_ntp_response(EPOCH_2017)) as server:
        yield server


@pytest.fixture
def silent_server() -> Iterator[_LoopbackServer]:
    with _LoopbackServer(None) as server:
        yield server


class TestUdpTransport:
    """Technique: Integration Testing."""

    def test_exchange_round_trip(self, answering_server: _LoopbackServer) -> None:
        data = UdpTransport().exchange(build_request(), "127.0.0.1", answering_server.port, 2.0)
        assert data == build_ntp_response(EPOCH_2017)
        assert answering_server.received == [build_request()]

    def test_timeout_raises_oserror(self, silent_server: _LoopbackServer) -> None:
        with pytest.raises(OSError):
            UdpTransport().exchange(build_request(), "127.0.0.1", silent_server.port, 0.2)


class TestNtpOverLoopback:
    """Technique: Integration Testing + Fallback Testing."""

    def test_query(self, answering_server: _LoopbackServer) -> None:
        settings = NtpSettings(server="127.0.0.1", port=answering_server.port, timeout=2.0)
        value = Ntp.query(settings=settings)
        assert value.to_unix_seconds() == EPOCH_2017
        assert value.provenance == "ntp:127.0.0.1"
        assert 0 <= value.subsec_milliseconds < 1000

    def test_query_timeout_is_ntp_error(self, silent_server: _LoopbackServer) -> None:
        settings = NtpSettings(server="127.0.0.1", port=silent_server.port, timeout=0.2)
        with pytest.raises(NtpError) as exc_info:
            Ntp.query(settings=settings)
        assert exc_info.value.server == "127.0.0.1"

    def test_now_falls_back_on_timeout(self, silent_server: _LoopbackServer) -> None:
        settings = NtpSettings(server="127.0.0.1", port=silent_server.port, timeout=0.2)
        value = Ntp.now(settings=settings)
        assert value.provenance == "system"
        assert not value.valid_server
