"""
Inbound messages - classification and decoding.

Every server message carries a "sys" header naming its type
(Response or Notification) and id. Responses also carry a
"success" flag; successful ones may carry "details".

    {"sys": {"type": "Response", "id": "MovePlayer"}, "success": true,
     "details": {"position": {"x": 210.0, "y": 200.0}}}
    {"sys": {"type": "Notification", "id": "StartGame"}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from errors import ProtocolError
from navigation import Position


class MessageKind(Enum):
    """Inbound message kinds, keyed by (sys.type, sys.id)."""

    REGISTER_PLAYER_RESPONSE = ("Response", "RegisterPlayer")
    MOVE_PLAYER_RESPONSE = ("Response", "MovePlayer")
    ROTATE_PLAYER_RESPONSE = ("Response", "RotatePlayer")
    SHOOT_RESPONSE = ("Response", "Shoot")
    DEPLOY_MINE_RESPONSE = ("Response", "DeployMine")
    RADAR_SCAN_NOTIFICATION = ("Notification", "RadarScan")
    START_GAME_NOTIFICATION = ("Notification", "StartGame")
    JOIN_GAME_NOTIFICATION = ("Notification", "JoinGame")
    SHOT_HIT_NOTIFICATION = ("Notification", "ShotHit")

    @property
    def is_response(self) -> bool:
        return self.value[0] == "Response"


# =============================================================================
# PAYLOADS
# =============================================================================


@dataclass(frozen=True)
class Success:
    data: Any = None
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    reason: str
    success: bool = field(default=False, init=False)


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class RegisterPlayerData:
    position: Position
    rotation: float
    player_id: str | None = None


@dataclass(frozen=True)
class MovePlayerData:
    position: Position


@dataclass(frozen=True)
class RadarScan:
    """Positions of everything the radar saw this tick."""

    players: tuple[Position, ...] = ()
    unknown: tuple[Position, ...] = ()
    shots: tuple[Position, ...] = ()
    mines: tuple[Position, ...] = ()


@dataclass(frozen=True)
class ShotHit:
    position: Position | None = None


@dataclass(frozen=True)
class InboundMessage:
    """Decoded message. payload is an Outcome for responses."""

    kind: MessageKind
    payload: Any = None


FAILURE_REASONS = {
    MessageKind.REGISTER_PLAYER_RESPONSE: "Failed player register",
    MessageKind.MOVE_PLAYER_RESPONSE: "Failed to move player",
    MessageKind.ROTATE_PLAYER_RESPONSE: "Failed to rotate player",
    MessageKind.SHOOT_RESPONSE: "Failed to shoot",
    MessageKind.DEPLOY_MINE_RESPONSE: "Failed to deploy mine",
}

_KINDS = {kind.value: kind for kind in MessageKind}


# =============================================================================
# DECODING
# =============================================================================


def classify(message: Any) -> MessageKind | None:
    """Message kind from the sys header, or None if unrecognised."""
    if not isinstance(message, dict):
        return None
    header = message.get("sys")
    if not isinstance(header, dict):
        return None
    return _KINDS.get((header.get("type"), header.get("id")))


def parse_position(raw: Any) -> Position:
    if not isinstance(raw, dict):
        raise ProtocolError(f"Invalid position: {raw!r}")
    try:
        return Position(float(raw["x"]), float(raw["y"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ProtocolError(f"Invalid position: {raw!r}") from e


def _details(message: dict) -> dict:
    details = message.get("details")
    if not isinstance(details, dict):
        raise ProtocolError("invalid response message: missing details")
    return details


def _positions(entries: Any, name: str) -> tuple[Position, ...]:
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise ProtocolError(f"invalid radar scan: {name} is not a list")
    return tuple(parse_position(entry.get("position") if isinstance(entry, dict) else None)
                 for entry in entries)


def _decode_response(kind: MessageKind, message: dict) -> Outcome:
    success = message.get("success")
    if not isinstance(success, bool):
        raise ProtocolError(f"invalid response message: success={success!r}")

    if not success:
        reason = message.get("reason")
        if not isinstance(reason, str) or not reason:
            reason = FAILURE_REASONS[kind]
        return Failure(reason)

    if kind == MessageKind.REGISTER_PLAYER_RESPONSE:
        details = _details(message)
        try:
            rotation = float(details.get("rotation", 0.0))
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"invalid rotation: {details.get('rotation')!r}") from e
        return Success(RegisterPlayerData(
            position=parse_position(details.get("position")),
            rotation=rotation,
            player_id=details.get("id"),
        ))

    if kind == MessageKind.MOVE_PLAYER_RESPONSE:
        details = _details(message)
        return Success(MovePlayerData(parse_position(details.get("position"))))

    # Rotate, shoot and deploy-mine responses carry no data
    return Success()


def _decode_notification(kind: MessageKind, message: dict) -> Any:
    if kind == MessageKind.RADAR_SCAN_NOTIFICATION:
        data = message.get("data")
        if not isinstance(data, dict):
            raise ProtocolError("invalid radar scan: missing data")
        return RadarScan(
            players=_positions(data.get("players"), "players"),
            unknown=_positions(data.get("unknown"), "unknown"),
            shots=_positions(data.get("shots"), "shots"),
            mines=_positions(data.get("mines"), "mines"),
        )

    if kind == MessageKind.SHOT_HIT_NOTIFICATION:
        data = message.get("data")
        if isinstance(data, dict) and "position" in data:
            return ShotHit(parse_position(data["position"]))
        return ShotHit()

    # Start/join game notifications carry no data
    return None


def decode(message: Any) -> InboundMessage | None:
    """
    Decode an already-parsed JSON message.

    Returns:
        InboundMessage, or None when the kind is not recognised.

    Raises:
        ProtocolError: if a recognised kind has the wrong shape.
    """
    kind = classify(message)
    if kind is None:
        return None

    if kind.is_response:
        return InboundMessage(kind, _decode_response(kind, message))
    return InboundMessage(kind, _decode_notification(kind, message))


def parse_message(text: str) -> Any:
    """Parse raw JSON text."""
    try:
        return json.loads(text)
    except ValueError as e:
        raise ProtocolError(f"Invalid JSON message: {text[:200]}") from e


def decode_message(text: str) -> InboundMessage | None:
    """Parse and decode raw JSON text. See decode()."""
    return decode(parse_message(text))
