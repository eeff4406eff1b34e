"""Wire protocol constants, message types and framing for the fight client."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 5000

PACKET_CODE = 0x89

DELAY_STAND = 5
DELAY_MOVE = 4
DELAY_ATTACK1 = 3
DELAY_ATTACK2 = 4
DELAY_ATTACK3 = 4
DELAY_EFFECT = 3

SCREEN_WIDTH = 640
SCREEN_HEIGHT = 480

SPEED_PLAYER_X = 3
SPEED_PLAYER_Y = 2

RANGE_MOVE_TOP = 50
RANGE_MOVE_LEFT = 10
RANGE_MOVE_RIGHT = 6390
RANGE_MOVE_BOTTOM = 6390

DIRECTION_LEFT = 0
DIRECTION_RIGHT = 4


class ProtocolError(ValueError):
    """Raised when a message cannot be framed or parsed."""


class Action(IntEnum):
    """Character actions; the eight moves double as wire directions."""

    MOVE_LL = 0
    MOVE_LU = 1
    MOVE_UU = 2
    MOVE_RU = 3
    MOVE_RR = 4
    MOVE_RD = 5
    MOVE_DD = 6
    MOVE_LD = 7
    ATTACK1 = 8
    ATTACK2 = 9
    ATTACK3 = 10
    STAND = 11

    @property
    def is_move(self) -> bool:
        return self < Action.ATTACK1

    @property
    def is_attack(self) -> bool:
        return Action.ATTACK1 <= self <= Action.ATTACK3


class PacketType(IntEnum):
    """Message type byte carried in the header."""

    SC_CREATE_MY_CHARACTER = 0
    SC_CREATE_OTHER_CHARACTER = 1
    SC_DELETE_CHARACTER = 2
    CS_MOVE_START = 10
    SC_MOVE_START = 11
    CS_MOVE_STOP = 12
    SC_MOVE_STOP = 13
    CS_ATTACK1 = 20
    SC_ATTACK1 = 21
    CS_ATTACK2 = 22
    SC_ATTACK2 = 23
    CS_ATTACK3 = 24
    SC_ATTACK3 = 25
    SC_DAMAGE = 30
    CS_SYNC = 250
    SC_SYNC = 251


class ObjectType(IntEnum):
    """Kinds of objects in the world; players sort before effects."""

    PLAYER = 0
    EFFECT = 1


_ACTION_PAYLOAD = struct.Struct("<Bhh")


@dataclass(frozen=True)
class Header:
    """Three-byte message header: code, payload size and type."""

    size: int
    packet_type: int
    code: int = PACKET_CODE

    SIZE: ClassVar[int] = 3
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<BBB")

    def pack(self) -> bytes:
        try:
            return self._STRUCT.pack(self.code, self.size, self.packet_type)
        except struct.error as exc:
            raise ProtocolError(f"header field out of range: {self}") from exc

    @classmethod
    def unpack(cls, data) -> "Header":
        if len(data) < cls.SIZE:
            raise ProtocolError(f"header needs {cls.SIZE} bytes, got {len(data)}")
        code, size, packet_type = cls._STRUCT.unpack_from(data)
        if code != PACKET_CODE:
            raise ProtocolError(f"bad packet code 0x{code:02x}")
        return cls(size=size, packet_type=packet_type, code=code)


def encode_message(packet_type: int, payload) -> bytes:
    """Frame a payload with its header."""
    body = bytes(payload)
    if len(body) > 0xFF:
        raise ProtocolError(f"payload of {len(body)} bytes does not fit in one message")
    return Header(size=len(body), packet_type=packet_type).pack() + body


def encode_action(packet_type: int, direction: int, x: int, y: int) -> bytes:
    """Build a client move/stop/attack message: direction byte and x, y shorts."""
    try:
        payload = _ACTION_PAYLOAD.pack(direction, x, y)
    except struct.error as exc:
        raise ProtocolError(
            f"action fields out of range: direction={direction}, x={x}, y={y}"
        ) from exc
    return encode_message(packet_type, payload)