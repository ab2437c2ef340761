# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Block buffering in front of a digest primitive."""

from typing import Optional


class Chunker:
    """
    Collects single bytes into fixed-size blocks.

    push() hands back a full block as soon as one is complete so the caller
    can feed it to the primitive's update(). Whatever is left over at the
    end comes out of flush_partial() for the primitive's finalize().
    """

    def __init__(self, block_size: int) -> None:
        if block_size < 1:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self._block_size = block_size
        self._buffer = bytearray()

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def pending(self) -> int:
        """Bytes buffered towards the next block."""
        return len(self._buffer)

    def push(self, byte: int) -> Optional[bytes]:
        self._buffer.append(byte)
        if len(self._buffer) < self._block_size:
            return None
        block = bytes(self._buffer)
        self._buffer.clear()
        return block

    def flush_partial(self) -> bytes:
        tail = bytes(self._buffer)
        self._buffer.clear()
        return tail
