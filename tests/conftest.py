"""
Shared pytest fixtures for the arena bot test suite.

Fixtures:
    channel: FakeChannel that records what the bot sends
    response: builds a server response message (JSON text)
    notification: builds a server notification message (JSON text)
    replay_log: writes a messages log file from (prefix, message) pairs
"""
import json

import pytest

from comm.channel import Channel


# =============================================================================
# CHANNEL FIXTURES
# =============================================================================

class FakeChannel(Channel):
    """In-memory channel: feeds queued inbound texts, records sends."""

    def __init__(self, inbound=()):
        self.inbound = list(inbound)
        self.sent = []
        self.opened = False
        self.closed = False

    @property
    def is_open(self) -> bool:
        return self.opened and not self.closed

    async def open(self) -> None:
        self.opened = True

    async def send(self, text: str) -> None:
        self.sent.append(text)

    async def receive(self):
        if self.closed or not self.inbound:
            return None
        return self.inbound.pop(0)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


# =============================================================================
# MESSAGE BUILDERS
# =============================================================================

@pytest.fixture
def response():
    """
    Build a response message.

    Example:
        >>> response("MovePlayer", details={"position": {"x": 1, "y": 2}})
    """
    def build(message_id, success=True, details=None, **extra):
        message = {"sys": {"type": "Response", "id": message_id}, "success": success}
        if details is not None:
            message["details"] = details
        message.update(extra)
        return json.dumps(message)

    return build


@pytest.fixture
def notification():
    def build(message_id, data=None):
        message = {"sys": {"type": "Notification", "id": message_id}}
        if data is not None:
            message["data"] = data
        return json.dumps(message)

    return build


@pytest.fixture
def replay_log(tmp_path):
    """Write [send]/[recv] lines to a log file and return its path."""
    def write(entries, name="replay-messages.log"):
        path = tmp_path / name
        path.write_text("".join(f"[{prefix}]{text}\n" for prefix, text in entries))
        return path

    return write
