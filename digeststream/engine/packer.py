# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Output unit packing.

Callers ask for the hashed stream as a sequence of fixed-width units: plain
bytes, or N-byte words assembled from N consecutive stream bytes. Units are
returned as Python ints, built with the configured byte order.

There are two packers. BytePacker is the unit_width == 1 case and never
holds any state, every byte is its own unit. UnitPacker buffers up to
unit_width - 1 bytes between calls, which is what lets a unit straddle the
point where the payload ends and the digest begins.
"""

from typing import Iterable, Literal, Optional, Union

from digeststream.errors import TruncatedUnitError

ByteOrder = Literal["little", "big"]


class BytePacker:
    """Pass-through packer for single-byte units."""

    unit_width = 1
    pending = 0

    def push_byte(self, byte: int) -> Optional[int]:
        return byte

    def finish(self) -> None:
        return None


class UnitPacker:
    """
    Packs a byte stream into unit_width-byte integers.

    push_byte() returns a finished unit once unit_width bytes have arrived
    and None otherwise. finish() is called when the byte stream ends; a
    partially filled unit at that point is a TruncatedUnitError.
    """

    def __init__(self, unit_width: int, byteorder: ByteOrder = "little") -> None:
        if unit_width < 2:
            raise ValueError(f"UnitPacker needs unit_width >= 2, got {unit_width}; use BytePacker")
        self.unit_width = unit_width
        self._byteorder: ByteOrder = byteorder
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Bytes held towards the next unit."""
        return len(self._buffer)

    def push_byte(self, byte: int) -> Optional[int]:
        self._buffer.append(byte)
        if len(self._buffer) < self.unit_width:
            return None
        unit = int.from_bytes(self._buffer, self._byteorder)
        self._buffer.clear()
        return unit

    def finish(self) -> None:
        if self._buffer:
            raise TruncatedUnitError(
                f"Byte stream ended mid-unit: expected {self.unit_width} bytes, "
                f"only {len(self._buffer)} available",
                expected=self.unit_width,
                available=len(self._buffer),
            )


Packer = Union[BytePacker, UnitPacker]


def make_packer(unit_width: int, byteorder: ByteOrder = "little") -> Packer:
    if unit_width == 1:
        return BytePacker()
    return UnitPacker(unit_width, byteorder)


def bytes_to_units(data: bytes, unit_width: int, byteorder: ByteOrder = "little") -> list[int]:
    """
    Split raw bytes into units.

    Raises:
        TruncatedUnitError: If len(data) is not a multiple of unit_width.
    """
    packer = make_packer(unit_width, byteorder)
    units: list[int] = []
    for byte in data:
        unit = packer.push_byte(byte)
        if unit is not None:
            units.append(unit)
    packer.finish()
    return units


def units_to_bytes(
    units: Union[bytes, bytearray, memoryview, Iterable[int]],
    unit_width: int,
    byteorder: ByteOrder = "little",
) -> bytes:
    """
    Flatten units back into their stream bytes.

    Bytes-like input is taken to be raw bytes already and returned as-is.

    Raises:
        ValueError: If a unit does not fit in unit_width bytes.
    """
    if isinstance(units, (bytes, bytearray, memoryview)):
        return bytes(units)

    out = bytearray()
    for unit in units:
        try:
            out += int(unit).to_bytes(unit_width, byteorder)
        except OverflowError as err:
            raise ValueError(f"Unit {unit!r} does not fit in {unit_width} bytes") from err
    return bytes(out)
