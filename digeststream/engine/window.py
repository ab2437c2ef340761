# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Rolling window for streams that carry their own digest at the end.

When verifying "payload followed by its digest" in a single pass, the engine
must hash only the payload, yet it cannot know where the payload ends until
the stream does. The window solves this by holding back the most recent
`capacity` bytes. A byte is released to the hasher only once `capacity`
newer bytes have arrived behind it, because by then it cannot be part of a
trailing digest.

When the upstream runs dry, the boundary between payload and digest is
worked out once from the total byte count:

  boundary = floor((end - region) / unit_width) * unit_width

where region is the digest size for raw digests and the padded length (the
next unit multiple above digest_size) for padded ones.

Held bytes before the boundary are replayed as the rest of the payload, and
held bytes from the boundary on are the claimed digest.
"""

import logging
from enum import Enum
from typing import Optional

from digeststream.engine.padding import padded_length
from digeststream.engine.source import Producer
from digeststream.errors import CapacityError, TruncationError
from digeststream.logging.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class WindowState(str, Enum):
    FILLING = "filling"
    BOUNDED = "bounded"


class RollingWindow:
    """
    Circular buffer that separates payload bytes from a trailing digest.

    Args:
        capacity: How many recent bytes to hold back. Must be at least the
            longest trailing digest that can appear.
        digest_size: Length of the unpadded digest at the end of the stream.
        unit_width: Output unit width; the payload ends on a unit edge.
        padded: Whether the trailing digest carries 0x80 00.. padding.
    """

    def __init__(
        self,
        capacity: int,
        digest_size: int,
        unit_width: int = 1,
        padded: bool = False,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._buf = bytearray(capacity)
        self._digest_size = digest_size
        self._unit_width = unit_width
        self._padded = padded
        self._end = 0
        self._boundary: Optional[int] = None
        self._cursor = 0

    @property
    def region_size(self) -> int:
        """Length of the trailing digest, padding included."""
        if self._padded:
            return padded_length(self._digest_size, self._unit_width)
        return self._digest_size

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def end_count(self) -> int:
        """Total bytes seen so far."""
        return self._end

    @property
    def state(self) -> WindowState:
        return WindowState.FILLING if self._boundary is None else WindowState.BOUNDED

    @property
    def boundary(self) -> Optional[int]:
        """Index of the first digest byte; None until the window is bounded."""
        return self._boundary

    def push(self, byte: int) -> Optional[int]:
        """
        Take the next upstream byte.

        Returns:
            The evicted byte if it is now known to be payload, else None.
        """
        if self._boundary is not None:
            raise RuntimeError("push() called on a bounded rolling window")
        slot = self._end % len(self._buf)
        evicted = self._buf[slot]
        self._buf[slot] = byte
        self._end += 1
        if self._end > len(self._buf):
            return evicted
        return None

    def close(self) -> int:
        """
        Mark the upstream as exhausted and fix the payload/digest boundary.

        Returns:
            The boundary index.

        Raises:
            TruncationError: Fewer bytes than the digest needs.
            CapacityError: The digest region is larger than the buffer.
        """
        if self._boundary is not None:
            return self._boundary

        region = self.region_size
        if self._end < region:
            raise TruncationError(
                f"Truncated data. Expected at least {region} bytes, only {self._end} bytes available.",
                expected=region,
                available=self._end,
            )

        boundary = self._boundary_for(region)
        held = self._end - boundary
        if held > len(self._buf):
            raise CapacityError(
                f"Truncated data or bad unit width. Cannot fit a {self._digest_size}-byte digest "
                f"and {self._unit_width}-byte units into {self._end} bytes: the digest region needs "
                f"{held} bytes but the window holds {len(self._buf)}.",
                expected=held,
                available=len(self._buf),
            )

        self._boundary = boundary
        self._cursor = max(0, self._end - len(self._buf))
        logger.debug(
            "Rolling window bounded",
            extra={
                "end_count": self._end,
                "boundary": boundary,
                "digest_bytes": held,
                "capacity": len(self._buf),
            },
        )
        return boundary

    def next_payload(self) -> Optional[int]:
        """Replay the next held payload byte after close(); None when done."""
        if self._boundary is None:
            raise RuntimeError("next_payload() called before close()")
        if self._cursor >= self._boundary:
            return None
        byte = self._buf[self._cursor % len(self._buf)]
        self._cursor += 1
        return byte

    def claimed_digest(self) -> bytes:
        """The bytes from the boundary to the end of the stream, in order."""
        if self._boundary is None:
            raise RuntimeError("claimed_digest() called before close()")
        return bytes(self._byte_at(i) for i in range(self._boundary, self._end))

    def payload_producer(self, upstream: Producer) -> Producer:
        """
        Wrap an upstream producer so only payload bytes come out.

        Bytes are delayed by the window until they are proven to be payload;
        once upstream is exhausted the window closes and the remaining
        payload is replayed from the buffer.
        """

        def pull() -> Optional[int]:
            if self._boundary is not None:
                return self.next_payload()
            while True:
                value = upstream()
                if value is None:
                    self.close()
                    return self.next_payload()
                released = self.push(value)
                if released is not None:
                    return released

        return pull

    def _byte_at(self, index: int) -> int:
        return self._buf[index % len(self._buf)]

    def _boundary_for(self, region: int) -> int:
        return ((self._end - region) // self._unit_width) * self._unit_width
