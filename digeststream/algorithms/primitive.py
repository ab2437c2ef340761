# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Digest primitives.

The engine never implements a hash function itself. It talks to a
primitive through a tiny block-oriented contract:

    update(block)        exactly `block_size` bytes, any number of times
    finalize(tail)       the final partial block (0..block_size-1 bytes),
                           returns `target_size` digest bytes

The concrete primitive wraps hashlib, which already has SHA-256, SHA-512
and BLAKE2b. BLAKE2b is told the target size up front because its output
depends on it; the SHA-2 digests are simply cut down to the target size.
"""

import hashlib
from typing import Optional, Protocol

from digeststream.algorithms.params import (
    HashAlgorithm,
    algorithm_params,
    resolve_target_size,
)


class DigestPrimitive(Protocol):
    """What the hasher needs from a digest implementation."""

    @property
    def block_size(self) -> int: ...

    @property
    def max_digest_size(self) -> int: ...

    @property
    def target_size(self) -> int: ...

    def update(self, block: bytes) -> None: ...

    def finalize(self, tail: bytes) -> bytes: ...


class HashlibPrimitive:
    """
    A DigestPrimitive backed by hashlib.

    One instance hashes exactly one stream. After finalize() has been called
    the instance refuses further input.
    """

    def __init__(self, algorithm: HashAlgorithm, target_size: int = 0) -> None:
        self._algorithm = HashAlgorithm(algorithm)
        self._params = algorithm_params(self._algorithm)
        self._target_size = resolve_target_size(self._algorithm, target_size)
        self._digest: Optional[bytes] = None

        if self._algorithm is HashAlgorithm.BLAKE2B:
            self._state = hashlib.blake2b(digest_size=self._target_size)
        else:
            self._state = hashlib.new(self._algorithm.value)

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    @property
    def block_size(self) -> int:
        return self._params.block_size

    @property
    def max_digest_size(self) -> int:
        return self._params.max_digest_size

    @property
    def target_size(self) -> int:
        return self._target_size

    @property
    def digest(self) -> Optional[bytes]:
        """The finished digest, or None while the stream is still open."""
        return self._digest

    def update(self, block: bytes) -> None:
        if self._digest is not None:
            raise RuntimeError(f"{self._params.name} primitive is already finalized")
        if len(block) != self._params.block_size:
            raise ValueError(
                f"{self._params.name} expects {self._params.block_size}-byte blocks, got {len(block)}"
            )
        self._state.update(block)

    def finalize(self, tail: bytes = b"") -> bytes:
        if self._digest is not None:
            raise RuntimeError(f"{self._params.name} primitive is already finalized")
        if len(tail) >= self._params.block_size:
            raise ValueError(
                f"Final partial block must be shorter than {self._params.block_size} bytes, got {len(tail)}"
            )
        if tail:
            self._state.update(tail)
        self._digest = self._state.digest()[: self._target_size]
        return self._digest


def create_primitive(algorithm: HashAlgorithm, target_size: int = 0) -> HashlibPrimitive:
    """Build a fresh primitive for one stream."""
    return HashlibPrimitive(algorithm, target_size)
