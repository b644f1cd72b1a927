"""
Bot definition - the handler registry the dispatcher drives.

A bot is a set of pure handlers keyed by inbound message kind plus a
factory for its starting state. Kinds without a handler are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, TypeVar

from comm.messages import MessageKind
from comm.requests import OutboundRequest

S = TypeVar("S")

# (payload, state) -> (new state, requests to send in order)
Handler = Callable[[Any, S], tuple[S, list[OutboundRequest]]]


@dataclass(frozen=True)
class Bot(Generic[S]):
    """Handler registry plus initial state factory."""

    initial_state: Callable[[], S]
    handlers: Mapping[MessageKind, Handler] = field(default_factory=dict)

    def handler_for(self, kind: MessageKind) -> Handler | None:
        return self.handlers.get(kind)
