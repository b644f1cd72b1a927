"""
Communication layer - talking to the game server.

- Channel: duplex text transport (WebSocket or log replay)
- messages: inbound message classification and decoding
- requests: outgoing request values and their JSON encoding
- MessageLog: [send]/[recv] log of the session
"""

from .channel import Channel, LogChannel, WebSocketChannel
from .message_log import MessageLog
from .messages import InboundMessage, MessageKind, decode_message
from .requests import OutboundRequest, encode_request

__all__ = [
    "Channel",
    "LogChannel",
    "WebSocketChannel",
    "MessageLog",
    "InboundMessage",
    "MessageKind",
    "decode_message",
    "OutboundRequest",
    "encode_request",
]
