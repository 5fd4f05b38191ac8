"""
Polling client for the relay.

Usage:
    from meeting_recorder.client import PollingSession, RelayClient

    session = PollingSession(RelayClient())
    await session.join("https://zoom.us/j/123")
    await session.wait()
"""

from .relay_client import RelayClient
from .session import PollingSession, SessionState, SessionView

__all__ = ["PollingSession", "RelayClient", "SessionState", "SessionView"]
