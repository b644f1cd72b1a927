import json

import pytest

from comm.messages import (
    Failure,
    InboundMessage,
    MessageKind,
    MovePlayerData,
    RadarScan,
    RegisterPlayerData,
    ShotHit,
    Success,
    classify,
    decode_message,
)
from errors import ProtocolError
from navigation import Position


@pytest.mark.parametrize(
    "message_type, message_id, kind",
    [
        ("Response", "RegisterPlayer", MessageKind.REGISTER_PLAYER_RESPONSE),
        ("Response", "MovePlayer", MessageKind.MOVE_PLAYER_RESPONSE),
        ("Response", "RotatePlayer", MessageKind.ROTATE_PLAYER_RESPONSE),
        ("Response", "Shoot", MessageKind.SHOOT_RESPONSE),
        ("Response", "DeployMine", MessageKind.DEPLOY_MINE_RESPONSE),
        ("Notification", "RadarScan", MessageKind.RADAR_SCAN_NOTIFICATION),
        ("Notification", "StartGame", MessageKind.START_GAME_NOTIFICATION),
        ("Notification", "JoinGame", MessageKind.JOIN_GAME_NOTIFICATION),
        ("Notification", "ShotHit", MessageKind.SHOT_HIT_NOTIFICATION),
    ],
)
def test_classify_known_kinds(message_type, message_id, kind) -> None:
    assert classify({"sys": {"type": message_type, "id": message_id}}) == kind


@pytest.mark.parametrize(
    "message",
    [
        {"sys": {"type": "Notification", "id": "Weather"}},
        {"sys": {"type": "Request", "id": "MovePlayer"}},
        {"type": "Response", "id": "MovePlayer"},
        {"sys": "Response"},
        [1, 2, 3],
        "text",
    ],
)
def test_classify_unknown_kinds(message) -> None:
    assert classify(message) is None


def test_unknown_kind_decodes_to_none() -> None:
    assert decode_message(json.dumps({"sys": {"type": "Notification", "id": "Weather"}})) is None


def test_register_success(response) -> None:
    text = response(
        "RegisterPlayer",
        details={"id": "bot-1", "position": {"x": 320, "y": 210.5}, "rotation": 45},
    )
    message = decode_message(text)

    assert message == InboundMessage(
        MessageKind.REGISTER_PLAYER_RESPONSE,
        Success(RegisterPlayerData(Position(320, 210.5), 45.0, "bot-1")),
    )
    assert message.payload.success is True


def test_register_success_without_rotation_defaults_to_zero(response) -> None:
    message = decode_message(response("RegisterPlayer", details={"position": {"x": 1, "y": 2}}))
    assert message.payload.data.rotation == 0.0


def test_failure_uses_default_reason(response) -> None:
    message = decode_message(response("RegisterPlayer", success=False))
    assert message.payload == Failure("Failed player register")
    assert message.payload.success is False


def test_failure_uses_server_reason_when_given(response) -> None:
    message = decode_message(response("MovePlayer", success=False, reason="Not enough tokens"))
    assert message.payload == Failure("Not enough tokens")


def test_move_success(response) -> None:
    message = decode_message(response("MovePlayer", details={"position": {"x": 250, "y": 199}}))
    assert message.payload == Success(MovePlayerData(Position(250, 199)))


@pytest.mark.parametrize("message_id", ["RotatePlayer", "Shoot", "DeployMine"])
def test_dataless_responses(response, message_id) -> None:
    message = decode_message(response(message_id))
    assert message.payload == Success()


@pytest.mark.parametrize("message_id", ["RegisterPlayer", "MovePlayer"])
def test_success_without_details_is_a_protocol_error(response, message_id) -> None:
    with pytest.raises(ProtocolError):
        decode_message(response(message_id))


@pytest.mark.parametrize(
    "position",
    [None, {"x": 1}, {"x": "a", "y": 2}, [1, 2]],
)
def test_bad_position_is_a_protocol_error(response, position) -> None:
    with pytest.raises(ProtocolError):
        decode_message(response("MovePlayer", details={"position": position}))


def test_missing_success_flag_is_a_protocol_error() -> None:
    text = json.dumps({"sys": {"type": "Response", "id": "RotatePlayer"}})
    with pytest.raises(ProtocolError):
        decode_message(text)


def test_invalid_json_is_a_protocol_error() -> None:
    with pytest.raises(ProtocolError):
        decode_message("{not json")


def test_radar_scan(notification) -> None:
    text = notification(
        "RadarScan",
        data={
            "players": [{"position": {"x": 10, "y": 20}}],
            "unknown": [],
            "shots": [{"position": {"x": 1, "y": 1}}, {"position": {"x": 2, "y": 2}}],
            "mines": [{"position": {"x": 5, "y": 6}}],
        },
    )
    message = decode_message(text)

    assert message.kind == MessageKind.RADAR_SCAN_NOTIFICATION
    assert message.payload == RadarScan(
        players=(Position(10, 20),),
        unknown=(),
        shots=(Position(1, 1), Position(2, 2)),
        mines=(Position(5, 6),),
    )


def test_radar_scan_without_mines(notification) -> None:
    message = decode_message(notification("RadarScan", data={"players": [], "unknown": [], "shots": []}))
    assert message.payload.mines == ()


def test_radar_scan_without_data_is_a_protocol_error(notification) -> None:
    with pytest.raises(ProtocolError):
        decode_message(notification("RadarScan"))


def test_radar_scan_with_bad_entries_is_a_protocol_error(notification) -> None:
    with pytest.raises(ProtocolError):
        decode_message(notification("RadarScan", data={"players": "everyone"}))
    with pytest.raises(ProtocolError):
        decode_message(notification("RadarScan", data={"players": [{"x": 1, "y": 2}]}))


@pytest.mark.parametrize("message_id", ["StartGame", "JoinGame"])
def test_game_notifications_carry_no_data(notification, message_id) -> None:
    message = decode_message(notification(message_id))
    assert message.payload is None


def test_shot_hit(notification) -> None:
    assert decode_message(notification("ShotHit")).payload == ShotHit()
    hit = decode_message(notification("ShotHit", data={"position": {"x": 3, "y": 4}}))
    assert hit.payload == ShotHit(Position(3, 4))
