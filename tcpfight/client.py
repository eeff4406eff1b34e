"""The game client: non-blocking server connection, frame pacing, input and main loop."""

from __future__ import annotations

import argparse
import errno
import select
import socket
import sys
import time
from pathlib import Path
from typing import NamedTuple, Optional

from tcpfight.packet import Packet
from tcpfight.protocol import (
    SERVER_HOST,
    SERVER_PORT,
    Action,
    Header,
    ProtocolError,
)
from tcpfight.ringbuffer import RingBuffer
from tcpfight.sprites import SpriteError, SpriteSheet
from tcpfight.surface import Surface
from tcpfight.world import World

FRAME_MS = 20
SKIP_MS = 40
TITLE_INTERVAL_MS = 1000

WINDOW_WIDTH = 640
WINDOW_HEIGHT = 480
SCREEN_BUFFER_WIDTH = 680
SCREEN_BUFFER_HEIGHT = 480

MAX_SPRITES = 100
COLOR_KEY = 0x00FFFFFF

_PENDING_CONNECT = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EAGAIN, errno.EALREADY, 10035}

_CHARACTER_CENTER = (71, 90)
_SPARK_CENTER = (70, 70)


def _character_frames(first_index: int, stems: list[str]) -> list[tuple[int, str, int, int]]:
    return [
        (first_index + offset, f"{stem}.bmp", *_CHARACTER_CENTER)
        for offset, stem in enumerate(stems)
    ]


SPRITE_FILES: list[tuple[int, str, int, int]] = [
    *_character_frames(0, ["Stand_L_01", "Stand_L_02", "Stand_L_03", "Stand_L_02", "Stand_L_01"]),
    *_character_frames(5, ["Stand_R_01", "Stand_R_02", "Stand_R_03", "Stand_R_02", "Stand_R_01"]),
    *_character_frames(10, [f"Attack1_L_0{n}" for n in range(1, 5)]),
    *_character_frames(14, [f"Attack1_R_0{n}" for n in range(1, 5)]),
    *_character_frames(18, [f"Attack2_L_0{n}" for n in range(1, 5)]),
    *_character_frames(22, [f"Attack2_R_0{n}" for n in range(1, 5)]),
    *_character_frames(26, [f"Attack3_L_0{n}" for n in range(1, 7)]),
    *_character_frames(32, [f"Attack3_R_0{n}" for n in range(1, 7)]),
    *_character_frames(38, [f"Move_L_{n:02d}" for n in (*range(1, 11), 12)]),
    *_character_frames(49, [f"Move_R_{n:02d}" for n in (*range(1, 11), 12)]),
    *[(60 + n, f"xSpark_{n + 1}.bmp", *_SPARK_CENTER) for n in range(4)],
    (64, "Shadow.bmp", 32, 4),
    (65, "HPGuage.bmp", 0, 0),
    (66, "_Map.bmp", 0, 0),
]


class Message(NamedTuple):
    """One complete server message: its type and its body."""

    packet_type: int
    packet: Packet


class Tick(NamedTuple):
    """What the frame timer decided: whether to draw, and how long to sleep first."""

    draw: bool
    sleep: int


class Connection:
    """A non-blocking TCP connection with queued sends and framed receives."""

    def __init__(self, sock: Optional[socket.socket] = None,
                 buffer_size: int = RingBuffer.DEFAULT_SIZE) -> None:
        self._recv_q = RingBuffer(buffer_size)
        self._send_q = RingBuffer(buffer_size)
        self._sock: Optional[socket.socket] = None
        self.connected = False
        self.can_send = False
        if sock is not None:
            sock.setblocking(False)
            self._sock = sock
            self.connected = True
            self.can_send = True

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._sock is None

    @property
    def pending(self) -> int:
        """Bytes queued but not yet handed to the socket."""
        return len(self._send_q)

    def connect(self, host: str, port: int) -> None:
        """Start connecting; completion is picked up by ``poll``."""
        if self._sock is not None:
            raise ConnectionError("connection is already open")
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setblocking(False)
        err = sock.connect_ex((host, port))
        if err == 0:
            self.connected = True
            self.can_send = True
        elif err not in _PENDING_CONNECT:
            sock.close()
            raise ConnectionError(err, f"cannot connect to {host}:{port}")
        self._sock = sock

    def send(self, data) -> None:
        """Queue a whole message and try to write it out."""
        if self._sock is None:
            raise ConnectionError("connection is closed")
        block = bytes(data)
        if len(block) > self._send_q.free_size:
            raise BufferError(
                f"send queue full: {len(block)} bytes, {self._send_q.free_size} free"
            )
        self._send_q.enqueue(block)
        self.flush()

    def flush(self) -> None:
        """Write queued bytes until the queue is empty or the socket would block."""
        if self._sock is None or not self.connected or not self.can_send:
            return
        while len(self._send_q):
            chunk = self._send_q.peek(len(self._send_q))
            try:
                sent = self._sock.send(chunk)
            except BlockingIOError:
                self.can_send = False
                return
            except OSError as exc:
                self.close()
                raise ConnectionError("send failed") from exc
            if sent == 0:
                self.can_send = False
                return
            self._send_q.move_front(sent)

    def feed(self, data) -> list[Message]:
        """Add received bytes and return every message that is now complete."""
        block = bytes(data)
        if len(block) > self._recv_q.free_size:
            raise BufferError(
                f"receive queue full: {len(block)} bytes, {self._recv_q.free_size} free"
            )
        self._recv_q.enqueue(block)
        return list(self._drain())

    def _drain(self):
        while len(self._recv_q) >= Header.SIZE:
            try:
                header = Header.unpack(self._recv_q.peek(Header.SIZE))
            except ProtocolError:
                self.close()
                raise
            if header.size + Header.SIZE > len(self._recv_q):
                break
            self._recv_q.move_front(Header.SIZE)
            payload = self._recv_q.dequeue(header.size)
            yield Message(header.packet_type, Packet(data=payload))

    def read_event(self) -> list[Message]:
        """Receive what the socket has and return the complete messages."""
        if self._sock is None:
            raise ConnectionError("connection is closed")
        free = self._recv_q.free_size
        if free == 0:
            return list(self._drain())
        try:
            data = self._sock.recv(free)
        except BlockingIOError:
            return []
        except OSError as exc:
            self.close()
            raise ConnectionError("receive failed") from exc
        if not data:
            self.close()
            raise ConnectionError("connection closed by peer")
        return self.feed(data)

    def poll(self) -> list[Message]:
        """Handle whatever the socket is ready for without waiting."""
        if self._sock is None:
            raise ConnectionError("connection is closed")
        sock = self._sock
        want_write = not self.connected or len(self._send_q) > 0
        readable, writable, failed = select.select(
            [sock] if self.connected else [],
            [sock] if want_write else [],
            [sock] if not self.connected else [],
            0,
        )
        if not self.connected:
            if failed or writable:
                err = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
                if err or failed:
                    self.close()
                    raise ConnectionError(err, "connection failed")
                self.connected = True
                self.can_send = True
            return []
        if writable:
            self.can_send = True
            self.flush()
        if readable and self._sock is not None:
            return self.read_event()
        return []

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
        self._sock = None
        self.connected = False
        self.can_send = False


def frame_skip(delta: int) -> bool:
    """True when a frame is so late that drawing it should be skipped."""
    return delta >= SKIP_MS


class FrameTimer:
    """Paces logic at one frame per 20 ms, skipping draws when far behind."""

    def __init__(self, start: int) -> None:
        self._old = start
        self._skip_time = start
        self._skipped = False
        self.delta = 0

    def tick(self, now: int) -> Tick:
        if self._skipped:
            self._old = now - (self.delta - (FRAME_MS - (now - self._skip_time)))
            self._skipped = False
        self.delta = now - self._old
        if frame_skip(self.delta):
            self._skipped = True
            self._skip_time = now
            return Tick(False, 0)
        sleep = max(0, FRAME_MS - self.delta)
        self._old = now - (self.delta - FRAME_MS)
        return Tick(True, sleep)


def key_action(up: bool, down: bool, left: bool, right: bool,
               attack1: bool, attack2: bool, attack3: bool) -> Action:
    """Turn the pressed keys into one action; later checks take precedence."""
    action = Action.STAND
    if up:
        action = Action.MOVE_UU
    if left:
        action = Action.MOVE_LL
    if right:
        action = Action.MOVE_RR
    if down:
        action = Action.MOVE_DD
    if up and left:
        action = Action.MOVE_LU
    if up and right:
        action = Action.MOVE_RU
    if down and left:
        action = Action.MOVE_LD
    if down and right:
        action = Action.MOVE_RD
    if attack1:
        action = Action.ATTACK1
    if attack2:
        action = Action.ATTACK2
    if attack3:
        action = Action.ATTACK3
    return action


def load_sprites(sheet: SpriteSheet, directory) -> None:
    """Load every sprite the game uses from ``directory``."""
    base = Path(directory)
    for index, name, center_x, center_y in SPRITE_FILES:
        sheet.load(index, base / name, center_x, center_y)


def _now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tcpfight", description="Networked fighting game client.")
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument("--sprites", default="SpriteData", help="directory of sprite bitmaps")
    args = parser.parse_args(argv)

    sheet = SpriteSheet(MAX_SPRITES, COLOR_KEY)
    try:
        load_sprites(sheet, args.sprites)
    except SpriteError as exc:
        print(f"tcpfight: {exc}", file=sys.stderr)
        return 1

    import pygame

    pygame.init()
    try:
        display = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("TCP Fight")
        surface = Surface(SCREEN_BUFFER_WIDTH, SCREEN_BUFFER_HEIGHT, 32)

        with Connection() as connection:
            try:
                connection.connect(args.host, args.port)
            except ConnectionError as exc:
                print(f"tcpfight: {exc}", file=sys.stderr)
                return 1

            world = World(send=connection.send)
            timer = FrameTimer(_now_ms())
            title_time = 0
            frames = 0

            while True:
                if any(event.type == pygame.QUIT for event in pygame.event.get()):
                    break
                try:
                    for message in connection.poll():
                        world.handle(message.packet_type, message.packet)

                    if pygame.key.get_focused():
                        pressed = pygame.key.get_pressed()
                        action = key_action(
                            pressed[pygame.K_UP], pressed[pygame.K_DOWN],
                            pressed[pygame.K_LEFT], pressed[pygame.K_RIGHT],
                            pressed[pygame.K_a], pressed[pygame.K_s], pressed[pygame.K_d],
                        )
                        if connection.connected and world.player is not None:
                            world.player.action_input(action)

                    world.run()
                except (ConnectionError, ProtocolError, BufferError) as exc:
                    print(f"tcpfight: {exc}", file=sys.stderr)
                    break

                frames += 1
                now = _now_ms()
                if now - title_time > TITLE_INTERVAL_MS:
                    pygame.display.set_caption(f"LogicFrame:{frames}")
                    frames = 0
                    title_time = now

                decision = timer.tick(now)
                if decision.draw:
                    if decision.sleep:
                        time.sleep(decision.sleep / 1000)
                    world.render(sheet, surface)

                image = pygame.image.frombuffer(
                    surface.buffer, (surface.width, surface.height), "BGRA"
                ).convert()
                display.blit(image, (0, 0))
                pygame.display.flip()
    finally:
        pygame.quit()
    return 0