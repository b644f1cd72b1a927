"""
Exceptions raised by the bot.

Game-level failures (a response with success=false) are not errors;
the state machine handles them as ordinary outcomes.
"""


class ProtocolError(ValueError):
    """Inbound message is not valid JSON or has the wrong shape for its kind."""


class InvalidStateError(RuntimeError):
    """Handler invoked outside its status domain, or status/payload mismatch."""


class ChannelError(ConnectionError):
    """Transport could not be opened or read."""
