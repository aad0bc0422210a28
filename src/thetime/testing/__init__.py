"""Public test-support utilities for thetime.

Re-exports test doubles and factories so that consumer test suites can
import everything from a single ``thetime.testing`` namespace instead
of reaching into private modules.

Provided symbols:

- :class:`FakeTransport` — scripted NTP transport that records calls.
- :class:`FakeClock` — deterministic monotonic clock.
- :func:`build_ntp_response` — encode a server response packet.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files.
"""

from thetime.testing._clock import FakeClock
from thetime.testing._settings import make_settings
from thetime.testing._transport import FakeTransport, build_ntp_response

__all__ = [
    "FakeClock",
    "FakeTransport",
    "build_ntp_response",
    "make_settings",
]
