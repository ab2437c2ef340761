# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for output unit packing."""

import pytest

from digeststream.engine.packer import (
    BytePacker,
    UnitPacker,
    bytes_to_units,
    make_packer,
    units_to_bytes,
)
from digeststream.errors import TruncatedUnitError, TruncationError


class TestMakePacker:
    def test_single_byte_units_use_pass_through(self) -> None:
        assert isinstance(make_packer(1), BytePacker)

    def test_wide_units_use_unit_packer(self) -> None:
        packer = make_packer(4)
        assert isinstance(packer, UnitPacker)
        assert packer.unit_width == 4

    def test_unit_packer_rejects_width_one(self) -> None:
        with pytest.raises(ValueError):
            UnitPacker(1)


class TestUnitPacker:
    def test_little_endian_assembly(self) -> None:
        packer = UnitPacker(4, "little")
        results = [packer.push_byte(b) for b in b"\x01\x02\x03\x04"]
        assert results == [None, None, None, 0x04030201]

    def test_big_endian_assembly(self) -> None:
        packer = UnitPacker(2, "big")
        packer.push_byte(0x12)
        assert packer.push_byte(0x34) == 0x1234

    def test_pending_tracks_partial_unit(self) -> None:
        packer = UnitPacker(4)
        packer.push_byte(0)
        packer.push_byte(0)
        assert packer.pending == 2

    def test_finish_with_partial_unit_raises(self) -> None:
        packer = UnitPacker(8)
        for byte in b"abc":
            packer.push_byte(byte)
        with pytest.raises(TruncatedUnitError) as excinfo:
            packer.finish()
        assert excinfo.value.expected == 8
        assert excinfo.value.available == 3
        assert isinstance(excinfo.value, TruncationError)


class TestConversions:
    def test_bytes_to_units(self) -> None:
        assert bytes_to_units(b"\x01\x00\x02\x00", 2) == [1, 2]

    def test_bytes_to_units_rejects_ragged_input(self) -> None:
        with pytest.raises(TruncatedUnitError):
            bytes_to_units(b"\x01\x00\x02", 2)

    def test_units_to_bytes(self) -> None:
        assert units_to_bytes([0x0201, 0x0403], 2) == b"\x01\x02\x03\x04"
        assert units_to_bytes([0x0102], 2, "big") == b"\x01\x02"

    def test_units_to_bytes_passes_bytes_through(self) -> None:
        assert units_to_bytes(b"\xaa\xbb\xcc", 8) == b"\xaa\xbb\xcc"

    def test_oversized_unit_raises(self) -> None:
        with pytest.raises(ValueError, match="does not fit"):
            units_to_bytes([0x10000], 2)
