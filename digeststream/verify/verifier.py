# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Digest verification.

Two ways a digest can travel with its payload:

  separate  the caller holds the payload and the digest apart. The payload
            is hashed and the result compared with the supplied digest.
  append    one stream holds the payload followed by its digest. The stream
            is run through a RollingWindow so only the payload gets hashed,
            and the computed digest is compared with what the window held
            back at the end.

A mismatch is an ordinary False. Only structural problems raise: a stream
too short to contain a digest, a digest that cannot be laid out in the
configured units, or a broken configuration.

On mismatch the expected and actual digests are logged as hex at WARNING
level. The log record never changes the result.
"""

import hmac
import logging
from typing import Any, Optional

from digeststream.config.schema import HashConfig, HashSite, build_hash_config, with_overrides
from digeststream.engine.hasher import StreamingHasher
from digeststream.engine.packer import units_to_bytes
from digeststream.engine.padding import strip_padding
from digeststream.logging.logger import get_logger
from digeststream.utils.hashing import format_hex

logger: logging.Logger = get_logger(__name__)


class HashVerifier:
    """
    Check payloads against digests produced by StreamingHasher.

    Args:
        config: The configuration the digest was produced with. The site
            selects the default mode of verify().
        **options: HashConfig fields, used to build or override `config`.
    """

    def __init__(self, config: Optional[HashConfig] = None, **options: Any) -> None:
        if config is None:
            config = build_hash_config(**options)
        elif options:
            config = with_overrides(config, **options)
        self._config = config

    @property
    def config(self) -> HashConfig:
        return self._config

    def verify(self, payload: Any, digest: Any = None) -> bool:
        """
        Verify using the configured site.

        For the separate site `digest` is required; for the append site the
        payload must already carry its digest and `digest` must be omitted.
        """
        if self._config.site is HashSite.APPEND:
            if digest is not None:
                raise ValueError("append-site verification takes a single combined stream")
            return self.verify_appended(payload)
        if digest is None:
            raise ValueError("separate-site verification needs the digest to compare against")
        return self.verify_separate(payload, digest)

    def verify_separate(self, payload: Any, digest: Any) -> bool:
        """
        Hash `payload` and compare it with a separately supplied digest.

        Args:
            payload: Any byte source the hasher accepts.
            digest: The claimed digest as output units (ints of unit_width
                bytes) or as raw bytes.

        Returns:
            True if the digest matches.
        """
        config = self._config
        claimed = units_to_bytes(digest, config.unit_width, config.byteorder)

        # The digest size comes from the config (target_size 0 is the
        # algorithm maximum), never from the claim itself.
        if config.padded:
            claimed_size = strip_padding(claimed, config.unit_width)
            if claimed_size is None:
                logger.warning(
                    "Claimed digest has malformed padding",
                    extra={"claimed": format_hex(claimed), "unit_width": config.unit_width},
                )
                return False
        else:
            claimed_size = len(claimed)

        if claimed_size != config.digest_size:
            logger.warning(
                "Claimed digest has the wrong size",
                extra={
                    "claimed": format_hex(claimed),
                    "claimed_size": claimed_size,
                    "digest_size": config.digest_size,
                },
            )
            return False

        hasher = StreamingHasher(payload, with_overrides(config, site=HashSite.SEPARATE))
        for _ in hasher:
            pass

        computed = hasher.digest or b""
        return self._report(self._matches(computed, claimed), expected=claimed, actual=computed, mode="separate")

    def verify_appended(self, stream: Any) -> bool:
        """
        Verify a stream that ends with its own digest.

        Raises:
            TruncationError: The stream is shorter than the digest.
            CapacityError: The digest cannot be separated from the payload
                with the configured unit width.
        """
        hash_config = with_overrides(self._config, site=HashSite.APPEND)
        hasher = StreamingHasher(stream, hash_config, skip_trailing_digest=True)
        for _ in hasher:
            pass

        window = hasher.window
        if window is None:
            raise RuntimeError("Skip-mode hasher was built without a rolling window")
        claimed = window.claimed_digest()
        computed = hasher.digest or b""
        return self._report(self._matches(computed, claimed), expected=claimed, actual=computed, mode="append")

    @staticmethod
    def _matches(computed: bytes, claimed: bytes) -> bool:
        if len(computed) != len(claimed):
            return False
        return hmac.compare_digest(computed, claimed)

    def _report(self, ok: bool, *, expected: bytes, actual: bytes, mode: str) -> bool:
        if ok:
            logger.info(
                "Digest verified",
                extra={
                    "mode": mode,
                    "algorithm": self._config.algorithm.value,
                    "digest_size": len(actual),
                },
            )
        else:
            logger.warning(
                "Digest mismatch",
                extra={
                    "mode": mode,
                    "algorithm": self._config.algorithm.value,
                    "expected": format_hex(expected),
                    "actual": format_hex(actual),
                    "expected_size": len(expected),
                    "actual_size": len(actual),
                },
            )
        return ok
