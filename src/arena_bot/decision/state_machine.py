"""
Circler state machine - reach the patrol circle, then walk around it.

The agent turns towards the patrol circle, drives to the closest
point where its heading line meets the circle, then repeatedly
rotates the circle-relative position by PATROL_STEP degrees, turns
towards that point and drives there.

Each handler is a pure function (payload, state) -> (state, requests).
States are never mutated; every transition builds a new AgentState.
A handler called with a state outside its domain raises
InvalidStateError: the dispatcher routed a message the protocol
never sends in that state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Union

from comm.messages import (
    Failure,
    MessageKind,
    MovePlayerData,
    Outcome,
    RadarScan,
    RegisterPlayerData,
)
from comm.requests import OutboundRequest, move_forward_request, rotate_request
from config import ARRIVAL_TOLERANCE, PATROL_STEP
from errors import InvalidStateError
from navigation import (
    PATROL_CENTER,
    PATROL_CIRCLE,
    Line,
    Position,
    Rotation,
    angle_between,
    circle_line_intersections,
    closest_point,
    heading_to_circle_center,
    next_patrol_point,
    within_tolerance,
)

from .bot import Bot

logger = logging.getLogger(__name__)


class AgentStatus(Enum):
    """Agent phase enumeration."""

    UNREGISTERED = auto()
    WAIT_TO_START = auto()
    ROTATE_TO_CIRCLE = auto()
    ROTATE_TO_NEXT_CIRCLE_POINT = auto()
    MOVE_TO_CIRCLE = auto()
    MOVE_TO_NEXT_CIRCLE_POINT = auto()
    STOP = auto()


@dataclass(frozen=True)
class RotateToCircleData:
    target_rotation: Rotation  # heading that reaches the circle boundary


@dataclass(frozen=True)
class MoveToCircleData:
    destination: Position


@dataclass(frozen=True)
class NextCirclePointData:
    next_circle_point: Position


StatusData = Union[RotateToCircleData, MoveToCircleData, NextCirclePointData, None]

STATUS_DATA_TYPES = {
    AgentStatus.UNREGISTERED: type(None),
    AgentStatus.WAIT_TO_START: type(None),
    AgentStatus.ROTATE_TO_CIRCLE: RotateToCircleData,
    AgentStatus.ROTATE_TO_NEXT_CIRCLE_POINT: NextCirclePointData,
    AgentStatus.MOVE_TO_CIRCLE: MoveToCircleData,
    AgentStatus.MOVE_TO_NEXT_CIRCLE_POINT: NextCirclePointData,
    AgentStatus.STOP: type(None),
}


@dataclass(frozen=True)
class AgentState:
    """
    Everything the agent knows about itself.

    status_data must be the payload type STATUS_DATA_TYPES lists for
    status. position and rotation are unknown until registration.
    """

    status: AgentStatus
    position: Position | None = None
    rotation: Rotation | None = None
    status_data: StatusData = field(default=None)

    def __post_init__(self):
        expected = STATUS_DATA_TYPES[self.status]
        if type(self.status_data) is not expected:
            raise InvalidStateError(
                f"{self.status.name} needs {expected.__name__} payload, "
                f"got {type(self.status_data).__name__}"
            )
        if self.status != AgentStatus.UNREGISTERED and self.position is None:
            raise InvalidStateError(f"{self.status.name} without a position")


def initial_state() -> AgentState:
    """Starting state: nothing known until the server registers us."""
    return AgentState(status=AgentStatus.UNREGISTERED)


def _require(state: AgentState, handler: str, *statuses: AgentStatus):
    if state.status not in statuses:
        allowed = ", ".join(s.name for s in statuses)
        raise InvalidStateError(f"{handler} not possible in {state.status.name} (expects {allowed})")


def _transition(old: AgentState, new: AgentState, requests: list[OutboundRequest]):
    if new.status != old.status:
        logger.info(f"Transition: {old.status.name} -> {new.status.name}")
    return new, requests


def _stop(state: AgentState, reason: str):
    logger.warning(f"Stopping: {reason}")
    stopped = AgentState(
        status=AgentStatus.STOP,
        position=state.position,
        rotation=state.rotation,
    )
    return _transition(state, stopped, [])


# =============================================================================
# HANDLERS
# =============================================================================


def register_player_response(outcome: Outcome, state: AgentState):
    logger.info("RegisterPlayerResponse")
    _require(state, "RegisterPlayerResponse", AgentStatus.UNREGISTERED)

    if isinstance(outcome, Failure):
        logger.warning(f"Registration failed: {outcome.reason}")
        return state, []

    data: RegisterPlayerData = outcome.data
    registered = AgentState(
        status=AgentStatus.WAIT_TO_START,
        position=data.position,
        rotation=data.rotation,
    )
    return _transition(state, registered, [])


def start_game_notification(_data, state: AgentState):
    logger.info("StartGameNotification")
    return _head_for_circle(state, "StartGameNotification")


def join_game_notification(_data, state: AgentState):
    logger.info("JoinGameNotification")
    return _head_for_circle(state, "JoinGameNotification")


def _head_for_circle(state: AgentState, handler: str):
    _require(state, handler, AgentStatus.WAIT_TO_START)

    heading = heading_to_circle_center(state.position, PATROL_CENTER)
    rotating = AgentState(
        status=AgentStatus.ROTATE_TO_CIRCLE,
        position=state.position,
        rotation=heading,
        status_data=RotateToCircleData(heading),
    )
    return _transition(state, rotating, [rotate_request(heading)])


def rotate_player_response(outcome: Outcome, state: AgentState):
    logger.info("RotatePlayerResponse")
    _require(
        state,
        "RotatePlayerResponse",
        AgentStatus.ROTATE_TO_CIRCLE,
        AgentStatus.ROTATE_TO_NEXT_CIRCLE_POINT,
    )

    if isinstance(outcome, Failure):
        return _stop(state, outcome.reason)

    if state.status == AgentStatus.ROTATE_TO_CIRCLE:
        heading_line = Line(state.position, state.status_data.target_rotation)
        intersections = circle_line_intersections(PATROL_CIRCLE, heading_line)
        destination = closest_point(state.position, intersections)
        logger.debug(f"Circle entry point ({destination.x:.1f}, {destination.y:.1f})")
        moving = AgentState(
            status=AgentStatus.MOVE_TO_CIRCLE,
            position=state.position,
            rotation=state.rotation,
            status_data=MoveToCircleData(destination),
        )
    else:
        moving = AgentState(
            status=AgentStatus.MOVE_TO_NEXT_CIRCLE_POINT,
            position=state.position,
            rotation=state.rotation,
            status_data=state.status_data,
        )

    return _transition(state, moving, [move_forward_request(with_turbo=False)])


def move_player_response(outcome: Outcome, state: AgentState):
    logger.info("MovePlayerResponse")
    _require(
        state,
        "MovePlayerResponse",
        AgentStatus.MOVE_TO_CIRCLE,
        AgentStatus.MOVE_TO_NEXT_CIRCLE_POINT,
    )

    if isinstance(outcome, Failure):
        return _stop(state, outcome.reason)

    data: MovePlayerData = outcome.data
    position = data.position

    if state.status == AgentStatus.MOVE_TO_CIRCLE:
        target = state.status_data.destination
    else:
        target = state.status_data.next_circle_point

    if not within_tolerance(position, target, ARRIVAL_TOLERANCE):
        # Keep going, same target
        return replace(state, position=position), [move_forward_request(with_turbo=False)]

    next_point = next_patrol_point(position, PATROL_STEP)
    heading = angle_between(position, next_point)
    logger.debug(
        f"Reached ({position.x:.1f}, {position.y:.1f}), "
        f"next ({next_point.x:.1f}, {next_point.y:.1f}) at {heading:.1f}°"
    )
    rotating = AgentState(
        status=AgentStatus.ROTATE_TO_NEXT_CIRCLE_POINT,
        position=position,
        rotation=heading,
        status_data=NextCirclePointData(next_point),
    )
    return _transition(state, rotating, [rotate_request(heading)])


def radar_scan_notification(scan: RadarScan, state: AgentState):
    """Reconnaissance only: the circler ignores what it sees."""
    logger.debug(
        f"RadarScanNotification: {len(scan.players)} players, "
        f"{len(scan.shots)} shots, {len(scan.mines)} mines"
    )
    return state, []


CIRCLER_HANDLERS = {
    MessageKind.REGISTER_PLAYER_RESPONSE: register_player_response,
    MessageKind.START_GAME_NOTIFICATION: start_game_notification,
    MessageKind.JOIN_GAME_NOTIFICATION: join_game_notification,
    MessageKind.ROTATE_PLAYER_RESPONSE: rotate_player_response,
    MessageKind.MOVE_PLAYER_RESPONSE: move_player_response,
    MessageKind.RADAR_SCAN_NOTIFICATION: radar_scan_notification,
}

CIRCLER = Bot(initial_state=initial_state, handlers=CIRCLER_HANDLERS)
