# tcpfight

A client for a small networked 2D fighting game. It connects to a game
server over TCP and draws every character the server reports on a map.
You control your own character with the keyboard. The server works out
hits and damage, and the client shows a spark effect and updates the
HP gauge when it is told of one.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running

```
tcpfight
```

Options:

| Option            | Default        | Meaning                          |
|-------------------|----------------|----------------------------------|
| `--host HOST`     | `127.0.0.1`    | server address                   |
| `--port PORT`     | `5000`         | server port                      |
| `--sprites DIR`   | `SpriteData`   | directory of sprite bitmaps      |

The client loads its sprites from the sprite directory before it opens a
window. They must be 32-bit BMP files with the names the client expects
(`Stand_L_01.bmp`, `Move_R_12.bmp`, `xSpark_1.bmp`, `Shadow.bmp`,
`HPGuage.bmp`, `_Map.bmp` and so on; see `SPRITE_FILES` in
`tcpfight.client`). If one is missing or unreadable, the command prints
the error and exits with status 1. It also exits with status 1 if the
connection cannot be started. The window title shows the number of
logic frames run in the last second.

### Controls

| Key         | Action                            |
|-------------|-----------------------------------|
| Arrow keys  | Move in eight directions          |
| `A`         | Attack 1                          |
| `S`         | Attack 2                          |
| `D`         | Attack 3                          |

Keys are read only while the window has focus.

## Package layout

- `tcpfight.protocol` holds the wire constants: `Action`, `PacketType`
  and `ObjectType`. It also has the three-byte `Header` (code, size,
  type) and the helpers `encode_message` and `encode_action`. Framing
  errors raise `ProtocolError`.
- `tcpfight.packet`: `Packet` is a fixed-capacity buffer with typed
  little-endian reads and writes such as `write_i16` and `read_i32`.
  Overflow and underflow raise `PacketError`.
- `tcpfight.ringbuffer`: `RingBuffer` is the fixed-size circular byte
  queue that the send and receive paths use.
- `tcpfight.surface`: `Surface` is a top-down pixel buffer with a
  4-byte aligned pitch, with `get_pixel`, `set_pixel` and `fill`.
- `tcpfight.sprites`: `SpriteSheet` loads 32-bit BMP sprites (`load`,
  `load_bytes`) and draws them with a colour key and clipping (`draw`,
  `draw_image`).
- `tcpfight.blend` has two extra drawing modes:
  - `draw_red` draws a sprite with its blue and green halved, tinting
    it red.
  - `draw_blend` mixes a sprite half and half with what lies below.
- `tcpfight.objects` has the animated game objects: `GameObject`,
  `PlayerObject` and `EffectObject`.
- `tcpfight.world` holds `World`, the set of live objects. It applies
  server messages to those objects and renders them with players first,
  each kind ordered from top to bottom.
- `tcpfight.client` holds the pieces that run the game:
  - `Connection`, a non-blocking socket with queued sends and framed
    receives
  - `FrameTimer`, which paces logic at one frame per 20 ms and skips
    drawing when a frame is 40 ms or more late
  - `key_action`, which turns pressed keys into an `Action`
  - `load_sprites`
  - `main`, the `tcpfight` command

## Example

```python
from tcpfight.protocol import Header, PacketType, encode_action

message = encode_action(PacketType.CS_MOVE_START, 4, 100, 200)
header = Header.unpack(message[:3])
assert header.packet_type == PacketType.CS_MOVE_START
assert header.size == 5
```

## What this package does not do

- It has no game server. `tcpfight` only connects to a server that
  speaks this protocol. With no server running, it cannot play.
- It ships no sprite bitmaps. You must supply them in the sprite
  directory.
- It does not send or handle the sync messages (`CS_SYNC`, `SC_SYNC`).
  These are defined in `PacketType` but not used.