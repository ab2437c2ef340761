# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the hashing engine.

Every failure here is local and synchronous: it surfaces on the call that
discovered it and is never retried internally. A verification mismatch is
not an error at all, it is just a False result from the verifier.

Errors that are about counts (truncation, capacity) carry both the number
of bytes that were expected and the number that were actually available,
so a caller can print something more useful than "it broke".
"""

from typing import Optional


class DigestStreamError(Exception):
    """Base for every exception raised by digeststream."""


class TruncationError(DigestStreamError):
    """
    The stream ended before enough bytes existed to satisfy a declared size.

    Raised when an appended digest cannot possibly fit in what was read, or
    when a unit stream stops in the middle of a unit.
    """

    def __init__(
        self,
        message: str,
        expected: Optional[int] = None,
        available: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.available = available


class TruncatedUnitError(TruncationError):
    """A byte stream ended part way through an output unit."""


class CapacityError(DigestStreamError):
    """
    The remaining bytes cannot fill what was asked of them.

    Two places raise this: the hasher, when the digest bytes left over
    cannot fill the next output unit, and the rolling window, when the
    payload/digest boundary falls outside what the buffer still holds.
    """

    def __init__(self, message: str, expected: int, available: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.available = available


class OwnershipError(DigestStreamError):
    """
    A hasher was driven from somewhere that does not own its live state.

    This covers duplicated hashers, hashers whose state was transferred
    away, and re-entrant calls into a hasher that is already mid-step.
    """
