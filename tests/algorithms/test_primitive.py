# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the hashlib-backed digest primitive."""

import hashlib

import pytest

from digeststream.algorithms.params import HashAlgorithm
from digeststream.algorithms.primitive import create_primitive
from digeststream.config.exceptions import ConfigValidationError


def _feed(algorithm: HashAlgorithm, data: bytes, target_size: int = 0) -> bytes:
    primitive = create_primitive(algorithm, target_size)
    size = primitive.block_size
    full = len(data) - len(data) % size
    for offset in range(0, full, size):
        primitive.update(data[offset : offset + size])
    return primitive.finalize(data[full:])


class TestBlockContract:
    def test_update_rejects_short_block(self) -> None:
        primitive = create_primitive(HashAlgorithm.SHA256)
        with pytest.raises(ValueError, match="64-byte blocks"):
            primitive.update(b"short")

    def test_finalize_rejects_full_block_tail(self) -> None:
        primitive = create_primitive(HashAlgorithm.SHA256)
        with pytest.raises(ValueError):
            primitive.finalize(bytes(64))

    def test_no_input_after_finalize(self) -> None:
        primitive = create_primitive(HashAlgorithm.SHA512)
        primitive.finalize()
        with pytest.raises(RuntimeError):
            primitive.update(bytes(128))
        with pytest.raises(RuntimeError):
            primitive.finalize()

    def test_digest_is_none_until_finalized(self) -> None:
        primitive = create_primitive(HashAlgorithm.BLAKE2B, 16)
        assert primitive.digest is None
        result = primitive.finalize(b"abc")
        assert primitive.digest == result


class TestDigestValues:
    @pytest.mark.parametrize("length", [0, 1, 63, 64, 65, 127, 128, 129, 1000])
    def test_sha256_matches_hashlib(self, length: int) -> None:
        data = bytes(i % 251 for i in range(length))
        assert _feed(HashAlgorithm.SHA256, data) == hashlib.sha256(data).digest()

    def test_sha512_truncates_to_target(self) -> None:
        data = b"payload" * 40
        assert _feed(HashAlgorithm.SHA512, data, 24) == hashlib.sha512(data).digest()[:24]

    def test_blake2b_uses_native_size(self) -> None:
        data = b"payload" * 40
        assert _feed(HashAlgorithm.BLAKE2B, data, 32) == hashlib.blake2b(data, digest_size=32).digest()

    def test_oversized_target_is_a_config_error(self) -> None:
        with pytest.raises(ConfigValidationError):
            create_primitive(HashAlgorithm.SHA256, 64)
