"""The set of objects in play and the handling of server messages that change it."""

from __future__ import annotations

from typing import Callable, Optional

from tcpfight.objects import (
    SPRITE_EFFECT_FIRST,
    SPRITE_EFFECT_LAST,
    SPRITE_MAP,
    EffectObject,
    GameObject,
    PlayerObject,
)
from tcpfight.packet import Packet
from tcpfight.protocol import DELAY_EFFECT, Action, ObjectType, PacketType
from tcpfight.sprites import SpriteSheet
from tcpfight.surface import Surface

EFFECT_OFFSET_Y = 70


class World:
    """All live objects plus the local player's own character."""

    def __init__(self, send: Optional[Callable[[bytes], None]] = None) -> None:
        self.objects: list[GameObject] = []
        self.player: Optional[PlayerObject] = None
        self._send = send

    def __len__(self) -> int:
        return len(self.objects)

    def handle(self, packet_type: int, packet: Packet) -> None:
        """Apply one server message; unknown types are ignored."""
        handlers = {
            PacketType.SC_CREATE_MY_CHARACTER: self.create_my_character,
            PacketType.SC_CREATE_OTHER_CHARACTER: self.create_other_character,
            PacketType.SC_DELETE_CHARACTER: self.delete_character,
            PacketType.SC_MOVE_START: self.move_start,
            PacketType.SC_MOVE_STOP: self.move_stop,
            PacketType.SC_ATTACK1: lambda p: self.attack(p, Action.ATTACK1),
            PacketType.SC_ATTACK2: lambda p: self.attack(p, Action.ATTACK2),
            PacketType.SC_ATTACK3: lambda p: self.attack(p, Action.ATTACK3),
            PacketType.SC_DAMAGE: self.damage,
        }
        handler = handlers.get(packet_type)
        if handler is not None:
            handler(packet)

    def _create(self, packet: Packet, is_player: bool) -> PlayerObject:
        object_id = packet.read_i32()
        direction = packet.read_u8()
        x = packet.read_i16()
        y = packet.read_i16()
        hp = packet.read_u8()
        character = PlayerObject(
            object_id, direction, hp, is_player, self._send if is_player else None
        )
        character.set_position(x, y)
        self.objects.append(character)
        return character

    def create_my_character(self, packet: Packet) -> PlayerObject:
        self.player = self._create(packet, True)
        return self.player

    def create_other_character(self, packet: Packet) -> PlayerObject:
        return self._create(packet, False)

    def delete_character(self, packet: Packet) -> None:
        object_id = packet.read_i32()
        self.objects = [obj for obj in self.objects if obj.object_id != object_id]
        if self.player is not None and self.player.object_id == object_id:
            self.player = None

    def _apply(self, packet: Packet, action: Optional[int]) -> None:
        object_id = packet.read_i32()
        direction = packet.read_u8()
        x = packet.read_i16()
        y = packet.read_i16()
        target = self.find(object_id)
        if target is not None:
            target.action_input(direction if action is None else action)
            target.set_position(x, y)

    def move_start(self, packet: Packet) -> None:
        self._apply(packet, None)

    def move_stop(self, packet: Packet) -> None:
        self._apply(packet, Action.STAND)

    def attack(self, packet: Packet, action: int) -> None:
        self._apply(packet, action)

    def damage(self, packet: Packet) -> None:
        packet.read_i32()  # attacker id
        damage_id = packet.read_i32()
        hp = packet.read_u8()
        victim = next(
            (
                obj
                for obj in self.objects
                if obj.object_type == ObjectType.PLAYER and obj.object_id == damage_id
            ),
            None,
        )
        if victim is None:
            return
        self.objects.append(
            EffectObject(
                0,
                victim.x,
                victim.y - EFFECT_OFFSET_Y,
                DELAY_EFFECT,
                SPRITE_EFFECT_FIRST,
                SPRITE_EFFECT_LAST,
            )
        )
        victim.hp = hp

    def find(self, object_id: int) -> Optional[GameObject]:
        return next((obj for obj in self.objects if obj.object_id == object_id), None)

    def run(self) -> None:
        """Step every object and drop the ones that report they are finished."""
        self.objects = [obj for obj in list(self.objects) if not obj.run()]

    def draw_order(self) -> list[GameObject]:
        """Players before effects, each kind from top to bottom."""
        return sorted(self.objects, key=lambda obj: (obj.object_type, obj.y))

    def render(self, sheet: SpriteSheet, surface: Surface) -> None:
        sheet.draw_image(SPRITE_MAP, 0, 0, surface)
        self.objects = self.draw_order()
        for obj in self.objects:
            obj.render(sheet, surface)