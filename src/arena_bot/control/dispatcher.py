"""
Message dispatcher - routes inbound messages to bot handlers.

For every inbound text:
1. Parse and classify it (unknown kinds are logged and dropped)
2. Decode the kind-specific payload
3. Run the bot's handler for that kind, if it has one
4. Send the produced requests, in order, before returning

Protocol errors and handler domain violations propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from comm.channel import Channel
from comm.message_log import RECV, SEND, MessageLog
from comm.messages import InboundMessage, decode, parse_message
from comm.requests import OutboundRequest, encode_request
from decision.bot import Bot

logger = logging.getLogger(__name__)

S = TypeVar("S")


def handle(message: InboundMessage, state: S, bot: Bot[S]) -> tuple[S, list[OutboundRequest]]:
    """Run the handler registered for message.kind. Missing handler = no-op."""
    handler = bot.handler_for(message.kind)
    if handler is None:
        logger.debug(f"No handler for {message.kind.name}")
        return state, []
    return handler(message.payload, state)


async def dispatch(
    channel: Channel,
    text: str,
    state: S,
    bot: Bot[S],
    message_log: MessageLog | None = None,
) -> S:
    """
    Process one inbound message end to end.

    Args:
        channel: Where produced requests are sent
        text: Raw inbound message
        state: Current agent state
        bot: Handler registry
        message_log: Optional [send]/[recv] log

    Returns:
        The new agent state (the same object when nothing changed).
    """
    if message_log is not None:
        message_log.record(RECV, text)
    raw: Any = parse_message(text)

    message = decode(raw)
    if message is None:
        logger.warning(f"Unexpected message: {text}")
        return state

    new_state, requests = handle(message, state, bot)

    for request in requests:
        payload = encode_request(request)
        if message_log is not None:
            message_log.record(SEND, payload)
        logger.debug(f"Sending {payload}")
        await channel.send(payload)

    return new_state
