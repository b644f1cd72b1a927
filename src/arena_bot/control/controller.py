"""
Main controller - Owns the session.

This is the main event loop that:
1. Opens the channel
2. Registers the player
3. Feeds every inbound message through the dispatcher
4. Replaces the agent state with whatever the handler returned
5. Stops when the channel closes (or on SIGINT/SIGTERM)
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

from comm.channel import Channel
from comm.message_log import SEND, MessageLog
from comm.requests import encode_request, register_player_request
from decision import CIRCLER, AgentState, Bot

from .dispatcher import dispatch

logger = logging.getLogger(__name__)


class Controller:
    """
    Session controller for one player.

    The agent state lives here and nowhere else. Messages are processed
    one at a time: requests produced for a message are sent before the
    next message is read.

    Usage:
        controller = Controller(channel, player_id="bot-1")
        asyncio.run(controller.run())
    """

    def __init__(
        self,
        channel: Channel,
        player_id: str,
        bot: Bot = CIRCLER,
        message_log: Optional[MessageLog] = None,
    ):
        self.channel = channel
        self.player_id = player_id
        self.bot = bot
        self.message_log = message_log

        self._state: Optional[AgentState] = None
        self._message_count = 0
        self._shutdown_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> Optional[AgentState]:
        """Latest agent state (None before run())."""
        return self._state

    @property
    def message_count(self) -> int:
        return self._message_count

    async def run(self):
        """Run the session until the channel closes."""
        logger.info(f"Controller starting for player {self.player_id}")

        loop = asyncio.get_running_loop()
        installed = self._install_signal_handlers(loop)

        try:
            await self.channel.open()
            if self.message_log is not None:
                self.message_log.truncate()

            self._state = self.bot.initial_state()
            await self._register()

            async for text in self.channel:
                self._state = await dispatch(
                    self.channel, text, self._state, self.bot, self.message_log
                )
                self._message_count += 1

            logger.info(f"Channel closed after {self._message_count} messages")

        except Exception as e:
            logger.error(f"Controller error: {e}", exc_info=True)
            raise
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            if self._shutdown_task is not None:
                await self._shutdown_task
            await self.channel.close()

    async def _register(self):
        """Send the one RegisterPlayer request that starts the session."""
        payload = encode_request(register_player_request(self.player_id))
        if self.message_log is not None:
            self.message_log.record(SEND, payload)
        await self.channel.send(payload)
        logger.info("Registration requested")

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[int]:
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._shutdown)
            except (NotImplementedError, RuntimeError):
                # Not supported off the main thread or on Windows
                continue
            installed.append(sig)
        return installed

    def _shutdown(self):
        """Handle shutdown signal."""
        logger.info("Shutdown requested")
        if self._shutdown_task is None:
            self._shutdown_task = asyncio.ensure_future(self.channel.close())
