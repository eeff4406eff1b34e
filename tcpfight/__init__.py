"""Networked 2D fighting game client: protocol, buffers, sprites, objects and main loop."""

__version__ = "0.1.0"

__all__ = [
    "blend",
    "client",
    "objects",
    "packet",
    "protocol",
    "ringbuffer",
    "sprites",
    "surface",
    "world",
]