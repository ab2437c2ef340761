# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Entry points.

Each function takes an optional HashConfig plus keyword options for any of
its fields, so the common cases read naturally:

    digest_of(b"hello world", algorithm="blake2b", target_size=32)
    units = append_digest(payload, algorithm="sha512")
    verify(units, algorithm="sha512", site="append")
"""

from typing import Any, Optional

from digeststream.config.schema import HashConfig, HashSite, build_hash_config, with_overrides
from digeststream.engine.hasher import StreamingHasher
from digeststream.verify.verifier import HashVerifier


def _resolve(config: Optional[HashConfig], options: dict[str, Any]) -> HashConfig:
    if config is None:
        return build_hash_config(**options)
    if options:
        return with_overrides(config, **options)
    return config


def hash_stream(source: Any, config: Optional[HashConfig] = None, **options: Any) -> StreamingHasher:
    """Lazy iterator of output units for `source`. Nothing is read until the first next()."""
    return StreamingHasher(source, _resolve(config, options))


def digest_of(source: Any, config: Optional[HashConfig] = None, **options: Any) -> bytes:
    """
    Hash a whole source and return the digest bytes, including any padding.

    The site is forced to separate; the payload is not echoed back.
    """
    resolved = with_overrides(_resolve(config, options), site=HashSite.SEPARATE)
    hasher = StreamingHasher(source, resolved)
    for _ in hasher:
        pass
    return hasher.digest or b""


def append_digest(source: Any, config: Optional[HashConfig] = None, **options: Any) -> list[int]:
    """Return the payload followed by its digest, as a list of output units."""
    resolved = with_overrides(_resolve(config, options), site=HashSite.APPEND)
    return list(StreamingHasher(source, resolved))


def verify(
    payload: Any,
    digest: Any = None,
    config: Optional[HashConfig] = None,
    **options: Any,
) -> bool:
    """
    Verify a digest. With the separate site `digest` is the claimed digest;
    with the append site `payload` is the combined stream and `digest` is
    left out.
    """
    return HashVerifier(_resolve(config, options)).verify(payload, digest)
