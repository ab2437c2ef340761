# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Per-algorithm constants.

Each supported digest algorithm has exactly two numbers the engine cares
about: the largest digest it can produce and the block size its compression
function consumes. Both are fixed for the lifetime of the process, so they
live in a small frozen lookup table keyed by the HashAlgorithm enum.

BLAKE2b's block size is 128 bytes. That is what hashlib reports and what
the test suite checks against.
"""

from dataclasses import dataclass
from enum import Enum

from digeststream.config.exceptions import ConfigValidationError


class HashAlgorithm(str, Enum):
    """Digest algorithms the engine can drive."""

    SHA256 = "sha256"
    SHA512 = "sha512"
    BLAKE2B = "blake2b"


@dataclass(frozen=True)
class AlgorithmParams:
    """Fixed sizes for one digest algorithm, all in bytes."""

    name: str
    max_digest_size: int
    block_size: int


_ALGORITHM_PARAMS: dict[HashAlgorithm, AlgorithmParams] = {
    HashAlgorithm.SHA256: AlgorithmParams(name="SHA256", max_digest_size=32, block_size=64),
    HashAlgorithm.SHA512: AlgorithmParams(name="SHA512", max_digest_size=64, block_size=128),
    HashAlgorithm.BLAKE2B: AlgorithmParams(name="BLAKE2B", max_digest_size=64, block_size=128),
}


def algorithm_params(algorithm: HashAlgorithm) -> AlgorithmParams:
    """Look up the constants for an algorithm (accepts the enum or its string value)."""
    return _ALGORITHM_PARAMS[HashAlgorithm(algorithm)]


def resolve_target_size(algorithm: HashAlgorithm, target_size: int) -> int:
    """
    Turn a caller-requested digest size into the size actually produced.

    Zero means "the algorithm's maximum". Anything above the maximum is a
    configuration error, raised here so it fails at construction time rather
    than half way through a stream.

    Raises:
        ConfigValidationError: If target_size is negative or above the maximum.
    """
    params = algorithm_params(algorithm)
    if target_size < 0:
        raise ConfigValidationError(f"Digest size {target_size} cannot be negative")
    if target_size > params.max_digest_size:
        raise ConfigValidationError(
            f"Digest size {target_size} is larger than maximum digest size "
            f"{params.max_digest_size} for {params.name}"
        )
    if target_size == 0:
        return params.max_digest_size
    return target_size
