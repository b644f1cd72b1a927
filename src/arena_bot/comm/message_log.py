"""
Per-player log of every message sent and received.

One line per message, "[send]<json>" or "[recv]<json>". LogChannel
replays files in this format.
"""

from __future__ import annotations

import logging
from pathlib import Path

from config import MESSAGE_LOG_SUFFIX

logger = logging.getLogger(__name__)

SEND = "send"
RECV = "recv"


class MessageLog:
    """Append-only messages log file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def for_player(cls, log_dir: str | Path, player_id: str) -> MessageLog:
        return cls(Path(log_dir) / f"{player_id}{MESSAGE_LOG_SUFFIX}")

    def truncate(self):
        """Start a fresh log for this session."""
        if self.path.exists():
            self.path.write_text("")
            logger.debug(f"Truncated {self.path}")

    def record(self, prefix: str, text: str):
        """Append one message."""
        if prefix not in (SEND, RECV):
            raise ValueError(f"Unknown message log prefix: {prefix}")
        # Raw newlines can only be JSON whitespace, one message per line
        line = text.replace("\n", " ")
        with open(self.path, "a") as f:
            f.write(f"[{prefix}]{line}\n")
