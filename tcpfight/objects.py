"""Animated world objects: the shared base, hit effects and player characters."""

from __future__ import annotations

from typing import Callable, Optional

from tcpfight.blend import draw_blend, draw_red
from tcpfight.protocol import (
    DELAY_ATTACK1,
    DELAY_ATTACK2,
    DELAY_ATTACK3,
    DELAY_MOVE,
    DELAY_STAND,
    DIRECTION_LEFT,
    DIRECTION_RIGHT,
    RANGE_MOVE_BOTTOM,
    RANGE_MOVE_LEFT,
    RANGE_MOVE_RIGHT,
    RANGE_MOVE_TOP,
    SPEED_PLAYER_X,
    SPEED_PLAYER_Y,
    Action,
    ObjectType,
    PacketType,
    encode_action,
)
from tcpfight.sprites import SpriteSheet
from tcpfight.surface import Surface

SPRITE_EFFECT_FIRST = 60
SPRITE_EFFECT_LAST = 63
SPRITE_SHADOW = 64
SPRITE_HP_GAUGE = 65
SPRITE_MAP = 66

Sender = Callable[[bytes], None]

# (facing, dx, dy) for each move; None keeps the current facing.
_MOVES = {
    Action.MOVE_LL: (DIRECTION_LEFT, -SPEED_PLAYER_X, 0),
    Action.MOVE_LU: (DIRECTION_LEFT, -SPEED_PLAYER_X, -SPEED_PLAYER_Y),
    Action.MOVE_UU: (None, 0, -SPEED_PLAYER_Y),
    Action.MOVE_RU: (DIRECTION_RIGHT, SPEED_PLAYER_X, -SPEED_PLAYER_Y),
    Action.MOVE_RR: (DIRECTION_RIGHT, SPEED_PLAYER_X, 0),
    Action.MOVE_RD: (DIRECTION_RIGHT, SPEED_PLAYER_X, SPEED_PLAYER_Y),
    Action.MOVE_DD: (None, 0, SPEED_PLAYER_Y),
    Action.MOVE_LD: (DIRECTION_LEFT, -SPEED_PLAYER_X, SPEED_PLAYER_Y),
}

# Sprite ranges as ((left first, left last), (right first, right last), delay).
_ANIMATIONS = {
    Action.STAND: ((0, 4), (5, 9), DELAY_STAND),
    Action.ATTACK1: ((10, 13), (14, 17), DELAY_ATTACK1),
    Action.ATTACK2: ((18, 21), (22, 25), DELAY_ATTACK2),
    Action.ATTACK3: ((26, 31), (32, 37), DELAY_ATTACK3),
}
_MOVE_ANIMATION = ((38, 48), (49, 59), DELAY_MOVE)

_ATTACK_PACKETS = {
    Action.ATTACK1: PacketType.CS_ATTACK1,
    Action.ATTACK2: PacketType.CS_ATTACK2,
    Action.ATTACK3: PacketType.CS_ATTACK3,
}


class GameObject:
    """An object in the world with a position and a looping sprite animation."""

    def __init__(self, object_id: int, object_type: ObjectType) -> None:
        self.object_id = object_id
        self.object_type = object_type
        self.x = 0
        self.y = 0
        self.old_x = 0
        self.old_y = 0
        self.pending_action: int = Action.STAND
        self.sprite_start = -1
        self.sprite_max = -1
        self.frame_delay = 0
        self.sprite = -1
        self.delay_count = 0
        self.end_frame = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.object_id}, x={self.x}, y={self.y}, "
            f"sprite={self.sprite})"
        )

    def action_input(self, action: int) -> None:
        """Record the action the object should take on its next run."""
        self.pending_action = action

    def set_position(self, x: int, y: int) -> None:
        self.old_x, self.old_y = self.x, self.y
        self.x, self.y = x, y

    def set_sprite(self, start: int, last: int, delay: int) -> None:
        """Start an animation over sprites ``start``..``last``, ``delay`` runs per frame."""
        self.sprite_start = start
        self.sprite_max = last
        self.frame_delay = delay
        self.sprite = start
        self.delay_count = 0
        self.end_frame = False

    def next_frame(self) -> None:
        """Advance the animation; wrapping to the start marks the end of a cycle."""
        if self.sprite_start < 0:
            return
        self.delay_count += 1
        if self.delay_count >= self.frame_delay:
            self.delay_count = 0
            self.sprite += 1
            if self.sprite > self.sprite_max:
                self.sprite = self.sprite_start
                self.end_frame = True

    def run(self) -> bool:
        """Step the object; True means it is finished and should be removed."""
        self.next_frame()
        return False

    def render(self, sheet: SpriteSheet, surface: Surface) -> None:
        sheet.draw(self.sprite, self.x, self.y, surface)


class EffectObject(GameObject):
    """A one-shot animation that removes itself after playing once."""

    def __init__(
        self,
        object_id: int,
        x: int,
        y: int,
        frame_delay: int,
        sprite_start: int,
        sprite_end: int,
    ) -> None:
        super().__init__(object_id, ObjectType.EFFECT)
        self.set_position(x, y)
        self.set_sprite(sprite_start, sprite_end, frame_delay)

    def run(self) -> bool:
        self.next_frame()
        return self.end_frame


class PlayerObject(GameObject):
    """A fighter; the local player's own character reports its actions via ``send``."""

    def __init__(
        self,
        object_id: int,
        direction: int,
        hp: int,
        is_player: bool = False,
        send: Optional[Sender] = None,
    ) -> None:
        super().__init__(object_id, ObjectType.PLAYER)
        self.is_player = is_player
        self.facing = direction
        self.move_direction = direction
        self.hp = hp
        self.action_cur: int = Action.STAND
        self.action_old: int = Action.STAND
        self._send = send
        self._set_stand()

    def run(self) -> bool:
        self.next_frame()
        self.action_proc()
        return False

    def action_proc(self) -> None:
        """Let a running attack finish, otherwise act on the pending input."""
        if self.action_cur in _ATTACK_PACKETS:
            if not self.is_player and self.action_cur != self.pending_action:
                if self.pending_action in _ATTACK_PACKETS:
                    self._set_attack(Action(self.pending_action))
            if self.end_frame:
                self._set_stand()
                self.pending_action = Action.STAND
        else:
            self.input_action_proc()

    def input_action_proc(self) -> None:
        """Move, attack or stand according to the pending input."""
        move = _MOVES.get(self.pending_action) if self.pending_action in _MOVES else None
        if move is not None:
            facing, dx, dy = move
            if facing is not None:
                self.facing = facing
            self.x = min(RANGE_MOVE_RIGHT, max(RANGE_MOVE_LEFT, self.x + dx))
            self.y = min(RANGE_MOVE_BOTTOM, max(RANGE_MOVE_TOP, self.y + dy))
            if self.action_cur != self.pending_action:
                self._set_move(self.pending_action)
            return

        if self.action_cur == self.pending_action:
            return
        if self.action_cur < Action.ATTACK1:
            self._emit(PacketType.CS_MOVE_STOP, self.facing)
        if self.pending_action in _ATTACK_PACKETS:
            self._set_attack(Action(self.pending_action))
        else:
            self._set_stand()

    def render(self, sheet: SpriteSheet, surface: Surface) -> None:
        draw_blend(sheet, SPRITE_SHADOW, self.x, self.y, surface)
        if self.is_player:
            draw_red(sheet, self.sprite, self.x, self.y, surface)
        else:
            sheet.draw(self.sprite, self.x, self.y, surface)
        sheet.draw(SPRITE_HP_GAUGE, self.x - 35, self.y + 9, surface, self.hp)

    def _emit(self, packet_type: PacketType, direction: int) -> None:
        if self.is_player and self._send is not None:
            self._send(encode_action(packet_type, direction, self.x, self.y))

    def _animate(self, animation) -> None:
        left, right, delay = animation
        first, last = left if self.facing == DIRECTION_LEFT else right
        self.set_sprite(first, last, delay)

    def _change_action(self, action: int) -> None:
        self.action_old = self.action_cur
        self.action_cur = action

    def _set_stand(self) -> None:
        self._change_action(Action.STAND)
        self._animate(_ANIMATIONS[Action.STAND])

    def _set_move(self, action: int) -> None:
        self._change_action(action)
        self.move_direction = action
        self._animate(_MOVE_ANIMATION)
        self._emit(PacketType.CS_MOVE_START, self.move_direction)

    def _set_attack(self, action: Action) -> None:
        self._change_action(action)
        self._animate(_ANIMATIONS[action])
        self._emit(_ATTACK_PACKETS[action], self.facing)