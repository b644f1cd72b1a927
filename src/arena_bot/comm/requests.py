"""
Outgoing requests - what the bot asks the game server to do.

Request values are immutable. encode_request/decode_request map them
to and from the JSON wire format:

    {"type": "Request", "id": "RotatePlayer", "data": {"rotation": 180.0}}
    {"type": "Request", "id": "MovePlayer",
     "data": {"movement": {"direction": "forward", "withTurbo": false}}}
    {"type": "Request", "id": "Shoot"}
    {"type": "Request", "id": "DeployMine"}
    {"type": "Request", "id": "RegisterPlayer", "data": {"id": "<player>"}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from errors import ProtocolError

REQUEST = "Request"
FORWARD = "forward"


@dataclass(frozen=True)
class RotateRequest:
    rotation: float  # degrees, sent as-is


@dataclass(frozen=True)
class MoveForwardRequest:
    with_turbo: bool = False


@dataclass(frozen=True)
class ShootRequest:
    pass


@dataclass(frozen=True)
class DeployMineRequest:
    pass


@dataclass(frozen=True)
class RegisterPlayerRequest:
    player_id: str


OutboundRequest = Union[RotateRequest, MoveForwardRequest, ShootRequest, DeployMineRequest]
Request = Union[OutboundRequest, RegisterPlayerRequest]


def rotate_request(rotation: float) -> RotateRequest:
    return RotateRequest(rotation)


def move_forward_request(with_turbo: bool = False) -> MoveForwardRequest:
    return MoveForwardRequest(with_turbo)


def shoot_request() -> ShootRequest:
    return ShootRequest()


def deploy_mine_request() -> DeployMineRequest:
    return DeployMineRequest()


def register_player_request(player_id: str) -> RegisterPlayerRequest:
    return RegisterPlayerRequest(player_id)


def request_to_dict(request: Request) -> dict:
    """Wire representation of a request."""
    if isinstance(request, RotateRequest):
        return {"type": REQUEST, "id": "RotatePlayer", "data": {"rotation": request.rotation}}
    if isinstance(request, MoveForwardRequest):
        movement = {"direction": FORWARD, "withTurbo": request.with_turbo}
        return {"type": REQUEST, "id": "MovePlayer", "data": {"movement": movement}}
    if isinstance(request, ShootRequest):
        return {"type": REQUEST, "id": "Shoot"}
    if isinstance(request, DeployMineRequest):
        return {"type": REQUEST, "id": "DeployMine"}
    if isinstance(request, RegisterPlayerRequest):
        return {"type": REQUEST, "id": "RegisterPlayer", "data": {"id": request.player_id}}
    raise TypeError(f"Not a request: {request!r}")


def encode_request(request: Request) -> str:
    return json.dumps(request_to_dict(request))


def decode_request(text: str) -> Request:
    """
    Parse a request from its wire form.

    Used when replaying message logs and in tests.

    Raises:
        ProtocolError: on invalid JSON or an unknown/malformed request.
    """
    try:
        message = json.loads(text)
        if message["type"] != REQUEST:
            raise ProtocolError(f"Not a request: {text}")
        request_id = message["id"]

        if request_id == "RotatePlayer":
            return RotateRequest(message["data"]["rotation"])
        if request_id == "MovePlayer":
            movement = message["data"]["movement"]
            if movement["direction"] != FORWARD:
                raise ProtocolError(f"Unsupported direction: {movement['direction']}")
            return MoveForwardRequest(bool(movement.get("withTurbo", False)))
        if request_id == "Shoot":
            return ShootRequest()
        if request_id == "DeployMine":
            return DeployMineRequest()
        if request_id == "RegisterPlayer":
            return RegisterPlayerRequest(message["data"]["id"])
    except ProtocolError:
        raise
    except (ValueError, KeyError, TypeError) as e:
        raise ProtocolError(f"Malformed request: {text}") from e

    raise ProtocolError(f"Unknown request id: {request_id}")
