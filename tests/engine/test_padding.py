# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for padded digests and the padding helpers."""

import pytest

from digeststream.algorithms.params import HashAlgorithm
from digeststream.algorithms.primitive import create_primitive
from digeststream.config.exceptions import ConfigValidationError
from digeststream.engine.padding import (
    PaddedDigest,
    pad_bytes,
    padded_length,
    strip_padding,
)


class TestPaddingHelpers:
    def test_pad_bytes_starts_with_marker(self) -> None:
        assert pad_bytes(1) == b"\x80"
        assert pad_bytes(4) == b"\x80\x00\x00\x00"
        assert pad_bytes(0) == b""

    @pytest.mark.parametrize(
        "digest_size, unit_width, expected",
        [
            (24, 8, 32),
            (32, 8, 40),
            (31, 8, 32),
            (20, 1, 21),
            (64, 16, 80),
        ],
    )
    def test_padded_length_fills_whole_units(self, digest_size: int, unit_width: int, expected: int) -> None:
        assert padded_length(digest_size, unit_width) == expected

    def test_padded_length_never_exceeds_one_unit_of_padding(self) -> None:
        for digest_size in range(1, 33):
            size = padded_length(digest_size, 8)
            assert size % 8 == 0
            assert digest_size + 1 <= size <= digest_size + 8

    def test_strip_padding_finds_marker(self) -> None:
        assert strip_padding(b"abc\x80\x00\x00", 4) == 3
        assert strip_padding(b"abc\x80", 4) == 3

    def test_strip_padding_rejects_bad_tail(self) -> None:
        assert strip_padding(b"abc\x00\x00", 4) is None
        assert strip_padding(b"abcd", 4) is None

    def test_strip_padding_does_not_scan_past_one_unit(self) -> None:
        assert strip_padding(b"a\x80\x00\x00\x00\x00", 4) is None


class TestPaddedDigest:
    def _padded(self, target: int = 24, unit_width: int = 8) -> PaddedDigest:
        return PaddedDigest(create_primitive(HashAlgorithm.SHA256, target), unit_width)

    def test_default_usable_size_is_target_plus_one(self) -> None:
        assert self._padded().usable_size == 25

    def test_digest_bytes_include_padding(self) -> None:
        padded = self._padded()
        padded.set_usable_size(32)
        raw = padded.finalize(b"\x01\x02")
        out = padded.digest_bytes()
        assert len(out) == 32
        assert out[:24] == raw
        assert out[24:] == b"\x80" + bytes(7)

    def test_usable_size_above_limit_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="maximum padded digest size 32"):
            self._padded().set_usable_size(33)

    def test_usable_size_without_pad_room_raises(self) -> None:
        with pytest.raises(ConfigValidationError):
            self._padded().set_usable_size(24)

    def test_digest_bytes_before_finalize_raises(self) -> None:
        with pytest.raises(RuntimeError):
            self._padded().digest_bytes()

    def test_forwards_primitive_properties(self) -> None:
        padded = self._padded(target=16, unit_width=4)
        assert padded.block_size == 64
        assert padded.max_digest_size == 32
        assert padded.target_size == 16
        assert padded.unit_width == 4
