# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
One-shot hashing helpers.

These go straight to hashlib with no streaming engine in between. They are
the reference the engine's output is checked against, and the hex helper
is what the verifier uses to dump digests into log records.
"""

import hashlib
from pathlib import Path

from digeststream.algorithms.params import HashAlgorithm, resolve_target_size
from digeststream.engine.source import READ_BUFFER_SIZE


def _new_state(algorithm: HashAlgorithm, target_size: int) -> "hashlib._Hash":
    algorithm = HashAlgorithm(algorithm)
    if algorithm is HashAlgorithm.BLAKE2B:
        return hashlib.blake2b(digest_size=target_size)
    return hashlib.new(algorithm.value)


def compute_digest(data: bytes, algorithm: HashAlgorithm, target_size: int = 0) -> bytes:
    """
    Digest raw bytes in one call.

    Args:
        data: The bytes to hash.
        algorithm: Which algorithm to use.
        target_size: Digest size in bytes, 0 for the algorithm maximum.

    Returns:
        The unpadded digest, `target_size` bytes long.
    """
    size = resolve_target_size(algorithm, target_size)
    state = _new_state(algorithm, size)
    state.update(data)
    return state.digest()[:size]


def compute_file_digest(file_path: Path, algorithm: HashAlgorithm, target_size: int = 0) -> bytes:
    """
    Digest a file without loading it into memory.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file can't be read.
    """
    size = resolve_target_size(algorithm, target_size)
    state = _new_state(algorithm, size)
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(READ_BUFFER_SIZE)
            if not chunk:
                break
            state.update(chunk)
    return state.digest()[:size]


def format_hex(data: bytes, limit: int = 0) -> str:
    """Lowercase hex of `data`, cut to `limit` bytes with a trailing '...' when limit > 0."""
    if limit and len(data) > limit:
        return data[:limit].hex() + "..."
    return data.hex()
