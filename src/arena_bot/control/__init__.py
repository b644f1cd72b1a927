"""
Control Layer - Execution.

Session loop and message routing between the channel and the bot.
"""

from .controller import Controller
from .dispatcher import dispatch, handle

__all__ = ["Controller", "dispatch", "handle"]
