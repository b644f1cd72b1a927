"""
Decision Layer - What to do.

Contains:
- Bot: handler registry driven by the dispatcher
- state_machine: the circler agent (AgentState, AgentStatus, handlers)
"""

from .bot import Bot, Handler
from .state_machine import CIRCLER, AgentState, AgentStatus, initial_state

__all__ = ["Bot", "Handler", "CIRCLER", "AgentState", "AgentStatus", "initial_state"]
