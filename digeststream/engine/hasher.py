# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The streaming hasher.

StreamingHasher is an iterator over output units. Every call to next() pulls
as many input bytes as it needs from the byte source, feeds them through the
Chunker into the digest primitive, and returns the next unit. All the work
happens inside next(); there is no background thread and nothing is read
ahead.

States:
  CONSUMING: pulling input. In append mode each completed unit of input is
             returned as it forms; in separate mode input is hashed and
             dropped until the source runs out.
  DRAINING:  the source is exhausted and the digest is fixed. Units are now
             built from digest bytes. A unit that was half filled with the
             last input bytes keeps filling from the digest; if the digest
             runs out before the final unit is full, CapacityError is raised
             instead of emitting a short unit.
  EXHAUSTED: every digest byte has been delivered.

The digest (padded or raw) is the same in both sites: its length depends only
on the target size and the unit width, never on the payload length.

Ownership: a hasher's digest state can only be driven by one owner. Copying
a hasher that has not read anything yet gives an independent fresh hasher;
copying one that has started gives a detached duplicate that remembers what
was produced but raises OwnershipError if you try to keep hashing with it.
transfer() moves the live state to a new object and detaches the old one.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from digeststream.algorithms.primitive import HashlibPrimitive, create_primitive
from digeststream.config.schema import (
    HashConfig,
    HashSite,
    build_hash_config,
    with_overrides,
)
from digeststream.engine.chunker import Chunker
from digeststream.engine.packer import make_packer
from digeststream.engine.padding import PaddedDigest, padded_length
from digeststream.engine.source import Producer, as_producer, is_reiterable
from digeststream.engine.window import RollingWindow
from digeststream.errors import CapacityError, OwnershipError
from digeststream.logging.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class HasherState(str, Enum):
    CONSUMING = "consuming"
    DRAINING = "draining"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class HashProgress:
    """Snapshot of what a hasher has produced so far. Carries no hashing state."""

    state: HasherState
    bytes_consumed: int
    units_emitted: int
    digest: Optional[bytes]


class StreamingHasher:
    """
    Lazily hash a byte source into a sequence of output units.

    Args:
        source: Anything as_producer() accepts.
        config: Hash configuration; built from `options` when omitted.
        skip_trailing_digest: The source ends with its own digest. Input is
            routed through a RollingWindow so only payload bytes get hashed;
            the claimed digest is then available from `window`.
        **options: HashConfig fields, used to build or override `config`.

    Raises:
        ConfigValidationError: The configuration is not usable.
    """

    def __init__(
        self,
        source: Any,
        config: Optional[HashConfig] = None,
        *,
        skip_trailing_digest: bool = False,
        **options: Any,
    ) -> None:
        if config is None:
            config = build_hash_config(**options)
        elif options:
            config = with_overrides(config, **options)

        self._config = config
        self._source = source
        self._skip_trailing_digest = skip_trailing_digest
        self._producer: Optional[Producer] = None

        self._window: Optional[RollingWindow] = None
        if skip_trailing_digest:
            headroom = config.unit_width if config.padded else 0
            self._window = RollingWindow(
                capacity=config.params.max_digest_size + headroom,
                digest_size=config.digest_size,
                unit_width=config.unit_width,
                padded=config.padded,
            )

        primitive: HashlibPrimitive = create_primitive(config.algorithm, config.target_size)
        self._padded: Optional[PaddedDigest] = None
        if config.padded:
            self._padded = PaddedDigest(primitive, config.unit_width)
        self._primitive: Union[HashlibPrimitive, PaddedDigest] = self._padded or primitive
        self._chunker = Chunker(primitive.block_size)
        self._packer = make_packer(config.unit_width, config.byteorder)

        self._state = HasherState.CONSUMING
        self._digest: Optional[bytes] = None
        self._digest_pos = 0
        self._consumed = 0
        self._emitted = 0
        self._detached = False
        self._busy = False

    @property
    def config(self) -> HashConfig:
        return self._config

    @property
    def state(self) -> HasherState:
        return self._state

    @property
    def bytes_consumed(self) -> int:
        """Input bytes hashed so far (payload only in skip mode)."""
        return self._consumed

    @property
    def units_emitted(self) -> int:
        return self._emitted

    @property
    def digest(self) -> Optional[bytes]:
        """The full digest including any padding, once draining has started."""
        return self._digest

    @property
    def window(self) -> Optional[RollingWindow]:
        return self._window

    @property
    def detached(self) -> bool:
        return self._detached

    @property
    def started(self) -> bool:
        return self._producer is not None or self._state is not HasherState.CONSUMING

    def snapshot(self) -> HashProgress:
        return HashProgress(
            state=self._state,
            bytes_consumed=self._consumed,
            units_emitted=self._emitted,
            digest=self._digest,
        )

    def transfer(self) -> "StreamingHasher":
        """
        Move the live hashing state into a new hasher.

        The new object continues exactly where this one stopped; this one
        becomes detached and raises OwnershipError on further use.
        """
        self._ensure_owner()
        successor = self.__class__.__new__(self.__class__)
        successor.__dict__.update(self.__dict__)
        self._detach()
        return successor

    def __copy__(self) -> "StreamingHasher":
        if not self.started and not self._detached:
            if not is_reiterable(self._source):
                raise OwnershipError(
                    "Cannot copy a hasher over a one-shot source; both copies would "
                    "pull from the same stream"
                )
            return self.__class__(
                self._source,
                self._config,
                skip_trailing_digest=self._skip_trailing_digest,
            )

        duplicate = self.__class__(
            self._source,
            self._config,
            skip_trailing_digest=self._skip_trailing_digest,
        )
        duplicate._state = self._state
        duplicate._consumed = self._consumed
        duplicate._emitted = self._emitted
        duplicate._digest = self._digest
        duplicate._detach()
        return duplicate

    def __deepcopy__(self, memo: dict) -> "StreamingHasher":
        return self.__copy__()

    def __iter__(self) -> "StreamingHasher":
        return self

    def __next__(self) -> int:
        self._ensure_owner()
        self._busy = True
        try:
            return self._step()
        finally:
            self._busy = False

    def _ensure_owner(self) -> None:
        if self._detached:
            raise OwnershipError(
                "This hasher has no hashing capability: its state was duplicated "
                "or transferred. Only the owning instance can continue."
            )
        if self._busy:
            raise OwnershipError("Re-entrant call into a hasher that is already mid-step")

    def _detach(self) -> None:
        self._detached = True
        self._producer = None
        self._source = None
        self._window = None
        self._padded = None
        self._primitive = None  # type: ignore[assignment]
        self._chunker = None  # type: ignore[assignment]
        self._packer = None  # type: ignore[assignment]

    def _pull(self) -> Optional[int]:
        if self._producer is None:
            if self._window is not None:
                # The combined stream is made of output units.
                upstream = as_producer(self._source, self._config.unit_width, self._config.byteorder)
                self._producer = self._window.payload_producer(upstream)
            else:
                self._producer = as_producer(
                    self._source, self._config.input_width, self._config.byteorder
                )
        return self._producer()

    def _emit(self, unit: int) -> int:
        self._emitted += 1
        return unit

    def _step(self) -> int:
        if self._state is HasherState.CONSUMING:
            append = self._config.site is HashSite.APPEND
            while True:
                byte = self._pull()
                if byte is None:
                    self._begin_draining()
                    break

                self._consumed += 1
                block = self._chunker.push(byte)
                if block is not None:
                    self._primitive.update(block)

                if append:
                    unit = self._packer.push_byte(byte)
                    if unit is not None:
                        return self._emit(unit)

        if self._state is HasherState.DRAINING:
            return self._drain()

        raise StopIteration

    def _begin_draining(self) -> None:
        digest = self._primitive.finalize(self._chunker.flush_partial())
        if self._padded is not None:
            self._padded.set_usable_size(
                padded_length(self._padded.target_size, self._config.unit_width)
            )
            digest = self._padded.digest_bytes()

        self._digest = digest
        self._digest_pos = 0
        self._state = HasherState.DRAINING
        logger.debug(
            "Input exhausted, draining digest",
            extra={
                "algorithm": self._config.algorithm.value,
                "bytes_consumed": self._consumed,
                "digest_size": self._config.digest_size,
                "emitted_digest_size": len(digest),
                "pending_unit_bytes": self._packer.pending,
            },
        )

    def _drain(self) -> int:
        digest = self._digest
        if digest is None:
            raise RuntimeError("Hasher is draining without a finalized digest")
        width = self._config.unit_width
        pending = self._packer.pending
        remaining = len(digest) - self._digest_pos

        if remaining == 0 and pending == 0:
            self._state = HasherState.EXHAUSTED
            raise StopIteration

        needed = width - pending
        if remaining < needed:
            self._state = HasherState.EXHAUSTED
            raise CapacityError(
                f"Cannot fill a {width}-byte output unit. Not enough digest data: expected "
                f"{needed} bytes, only {remaining} of {len(digest)} digest bytes available.",
                expected=needed,
                available=remaining,
            )

        while True:
            byte = digest[self._digest_pos]
            self._digest_pos += 1
            unit = self._packer.push_byte(byte)
            if unit is not None:
                if self._digest_pos == len(digest):
                    self._state = HasherState.EXHAUSTED
                return self._emit(unit)
