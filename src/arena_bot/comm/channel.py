"""
Duplex text channels to the game server.

Two implementations:
- WebSocketChannel: live connection (aiohttp client)
- LogChannel: replays the [recv] lines of a recorded messages log

Usage:
    channel = WebSocketChannel("ws://localhost:8889")
    await channel.open()
    await channel.send(text)
    async for text in channel:
        ...
    await channel.close()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator

import aiohttp

from errors import ChannelError

logger = logging.getLogger(__name__)


class Channel(ABC):
    """Base class for message channels."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    async def open(self) -> None:
        ...

    @abstractmethod
    async def send(self, text: str) -> None:
        """Send one message. Order of sends is preserved."""
        ...

    @abstractmethod
    async def receive(self) -> str | None:
        """
        Wait for the next inbound message.

        Returns:
            Message text, or None once the channel is closed.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            text = await self.receive()
            if text is None:
                return
            yield text


class WebSocketChannel(Channel):
    """
    Live channel over a WebSocket connection.

    Only TEXT frames are delivered. A CLOSE, CLOSED or ERROR frame
    ends the stream.
    """

    def __init__(self, url: str, heartbeat: float | None = None):
        self.url = url
        self.heartbeat = heartbeat or None
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def open(self) -> None:
        logger.info(f"Connecting to {self.url}")
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await self._session.ws_connect(self.url, heartbeat=self.heartbeat)
        except (aiohttp.ClientError, OSError) as e:
            await self._session.close()
            self._session = None
            raise ChannelError(f"Failed to connect to {self.url}: {e}") from e
        logger.info("Connection open")

    async def send(self, text: str) -> None:
        if not self.is_open:
            raise ChannelError("Channel is not open")
        await self._ws.send_str(text)

    async def receive(self) -> str | None:
        ws = self._ws
        if ws is None:
            return None

        while True:
            msg = await ws.receive()

            if msg.type == aiohttp.WSMsgType.TEXT:
                return msg.data

            if msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED):
                logger.info("Connection closed")
                return None

            if msg.type == aiohttp.WSMsgType.ERROR:
                raise ChannelError(f"WebSocket error: {ws.exception()}")

            logger.debug(f"Ignoring {msg.type.name} frame")

    async def close(self) -> None:
        ws, self._ws = self._ws, None
        session, self._session = self._session, None
        if ws is not None:
            await ws.close()
        if session is not None:
            await session.close()


class LogChannel(Channel):
    """
    Replay channel over a messages log file.

    Each "[recv]<json>" line is delivered as an inbound message and
    "[send]" lines are skipped. Whatever the bot sends is kept in
    self.sent instead of going anywhere. The channel closes at the
    end of the file.
    """

    RECV = "[recv]"
    SEND = "[send]"

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.sent: list[str] = []
        self._lines: list[str] | None = None
        self._index = 0

    @property
    def is_open(self) -> bool:
        return self._lines is not None and self._index < len(self._lines)

    async def open(self) -> None:
        try:
            self._lines = self.path.read_text().splitlines()
        except OSError as e:
            raise ChannelError(f"Failed to read {self.path}: {e}") from e
        self._index = 0
        logger.info(f"Replaying {self.path} ({len(self._lines)} lines)")

    async def send(self, text: str) -> None:
        self.sent.append(text)

    async def receive(self) -> str | None:
        if self._lines is None:
            return None

        while self._index < len(self._lines):
            line = self._lines[self._index]
            self._index += 1

            if not line.strip() or line.startswith(self.SEND):
                continue
            if line.startswith(self.RECV):
                return line[len(self.RECV):]
            raise ChannelError(f"{self.path}:{self._index}: unexpected line prefix")

        logger.info("Replay finished")
        return None

    async def close(self) -> None:
        if self._lines is not None:
            self._index = len(self._lines)
