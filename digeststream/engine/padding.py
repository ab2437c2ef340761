# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Padded digests.

A raw digest only fits into multi-byte output units if its length happens to
be a multiple of the unit width. The padded format fixes that by extending
the digest with one 0x80 byte followed by zero bytes, the same marker style
RFC 1321 uses for message padding. At least one pad byte is always present
so the marker can be found again when verifying.

The padded length depends only on the digest size and the unit width, so the
same digest comes out in both sites whatever the payload length was.
PaddedDigest starts at the minimum padded length (digest + 1) and the hasher
applies the final size once the digest is fixed, capped at one unit's worth
of extra bytes.
"""

from typing import Optional

from digeststream.algorithms.primitive import DigestPrimitive
from digeststream.config.exceptions import ConfigValidationError

PAD_MARKER = 0x80


def pad_bytes(length: int) -> bytes:
    """Padding of the given length: 0x80 then zeros. Zero length gives b""."""
    if length <= 0:
        return b""
    return bytes([PAD_MARKER]) + bytes(length - 1)


def padded_length(digest_size: int, unit_width: int) -> int:
    """
    Smallest multiple of unit_width that is at least digest_size + 1.
    Never exceeds digest_size + unit_width.
    """
    size = digest_size + 1
    remainder = size % unit_width
    if remainder:
        size += unit_width - remainder
    return size


def strip_padding(data: bytes, unit_width: int) -> Optional[int]:
    """
    Find where the padding starts in a padded digest.

    Scans back from the end over at most unit_width - 1 zero bytes and
    expects the 0x80 marker right before them.

    Returns:
        The unpadded length, or None if the tail is not valid padding.
    """
    for pad_len in range(1, min(unit_width, len(data)) + 1):
        byte = data[len(data) - pad_len]
        if byte == PAD_MARKER:
            return len(data) - pad_len
        if byte != 0x00:
            return None
    return None


class PaddedDigest:
    """
    Wraps a DigestPrimitive and extends its digest with standard padding.

    Block input passes straight through to the wrapped primitive. The only
    extra state is the usable size: how many bytes digest_bytes() returns.
    """

    def __init__(self, inner: DigestPrimitive, unit_width: int) -> None:
        if unit_width < 1:
            raise ValueError(f"unit_width must be positive, got {unit_width}")
        self._inner = inner
        self._unit_width = unit_width
        self._usable_size = inner.target_size + 1
        self._digest: Optional[bytes] = None

    @property
    def block_size(self) -> int:
        return self._inner.block_size

    @property
    def max_digest_size(self) -> int:
        return self._inner.max_digest_size

    @property
    def target_size(self) -> int:
        return self._inner.target_size

    @property
    def unit_width(self) -> int:
        return self._unit_width

    @property
    def usable_size(self) -> int:
        """Digest length including padding."""
        return self._usable_size

    def set_usable_size(self, size: int) -> None:
        """
        Set the padded digest length.

        The lower bound keeps the 0x80 marker in every padded digest; without
        it strip_padding() could not tell where the digest ends.

        Raises:
            ConfigValidationError: If size leaves no room for the pad marker or
                needs more than one unit of padding.
        """
        limit = self._inner.target_size + self._unit_width
        if size > limit:
            raise ConfigValidationError(
                f"Length {size} is larger than maximum padded digest size {limit}"
            )
        if size <= self._inner.target_size:
            raise ConfigValidationError(
                f"Length {size} leaves no room for padding after a "
                f"{self._inner.target_size}-byte digest"
            )
        self._usable_size = size

    def update(self, block: bytes) -> None:
        self._inner.update(block)

    def finalize(self, tail: bytes = b"") -> bytes:
        """Finish the wrapped digest and return it unpadded."""
        self._digest = self._inner.finalize(tail)
        return self._digest

    def digest_bytes(self) -> bytes:
        if self._digest is None:
            raise RuntimeError("digest_bytes() called before finalize()")
        return self._digest + pad_bytes(self._usable_size - self._inner.target_size)
