# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Byte sources.

The engine pulls its input one byte at a time from a producer: a
zero-argument callable that returns the next byte as an int, or None once
the stream is over. Callers rarely have one of those lying around, so
as_producer() builds one from whatever they do have:

  - a producer callable (wrapped so it is never called after its first None)
  - bytes, bytearray or memoryview
  - a binary file object (anything with .read), read in 64 KiB chunks
  - an iterable of byte chunks, e.g. a generator reading a socket
  - an iterable of ints; each int is one input element of element_width
    bytes, laid out with the given byte order

Nothing is read ahead of what the engine asks for beyond the current chunk.
"""

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any, Literal, Optional

READ_BUFFER_SIZE = 65536  # 64 KiB

Producer = Callable[[], Optional[int]]


def iter_file_bytes(file_path: Path) -> Iterator[bytes]:
    """
    Yield a file's contents in READ_BUFFER_SIZE chunks.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file can't be read.
    """
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(READ_BUFFER_SIZE)
            if not chunk:
                break
            yield chunk


def _iter_reader(reader: Any) -> Iterator[bytes]:
    while True:
        chunk = reader.read(READ_BUFFER_SIZE)
        if not chunk:
            break
        yield chunk


def _iter_elements(
    elements: Iterable[Any],
    element_width: int,
    byteorder: Literal["little", "big"],
) -> Iterator[int]:
    for element in elements:
        if isinstance(element, (bytes, bytearray, memoryview)):
            yield from bytes(element)
        elif element_width == 1:
            value = int(element)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Byte value {value} is out of range 0..255")
            yield value
        else:
            try:
                yield from int(element).to_bytes(element_width, byteorder)
            except OverflowError as err:
                raise ValueError(
                    f"Element {element!r} does not fit in {element_width} bytes"
                ) from err


class LatchedProducer:
    """
    A producer that stays exhausted.

    Once the wrapped producer returns None it is never called again, and
    every later call returns None straight away.
    """

    def __init__(self, producer: Producer) -> None:
        self._producer = producer
        self._exhausted = False
        self._count = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def bytes_read(self) -> int:
        return self._count

    def __call__(self) -> Optional[int]:
        if self._exhausted:
            return None
        value = self._producer()
        if value is None:
            self._exhausted = True
            return None
        self._count += 1
        return value


def is_reiterable(source: Any) -> bool:
    """
    True when as_producer(source) can be called twice and see the same bytes.

    One-shot iterators, file objects and producer callables all fail this.
    """
    if isinstance(source, (bytes, bytearray, memoryview, str)):
        return True
    if callable(source) or hasattr(source, "read"):
        return False
    if isinstance(source, Iterator):
        return False
    return isinstance(source, Iterable)


def as_producer(
    source: Any,
    element_width: int = 1,
    byteorder: Literal["little", "big"] = "little",
) -> LatchedProducer:
    """
    Adapt a byte source into a latched producer.

    Raises:
        TypeError: If the source is none of the supported kinds.
    """
    if isinstance(source, LatchedProducer):
        return source
    if isinstance(source, str):
        raise TypeError("Text is not a byte source; encode it first")

    if isinstance(source, (bytes, bytearray, memoryview)):
        stream: Iterator[int] = iter(bytes(source))
    elif hasattr(source, "read"):
        stream = _iter_elements(_iter_reader(source), 1, byteorder)
    elif callable(source):
        return LatchedProducer(source)
    elif isinstance(source, Iterable):
        stream = _iter_elements(source, element_width, byteorder)
    else:
        raise TypeError(f"Unsupported byte source type: {type(source).__name__}")

    return LatchedProducer(lambda: next(stream, None))
