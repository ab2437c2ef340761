# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for digeststream.

Everything that selects how a stream gets hashed lives in one frozen
pydantic model, HashConfig: algorithm, output unit width, digest format,
digest site, target size, and the byte order used to assemble units.
Instead of a separate entry point for every combination of those, there is
one record with sensible defaults and the engine reads everything from it.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from digeststream.algorithms.params import (
    AlgorithmParams,
    HashAlgorithm,
    algorithm_params,
)
from digeststream.config.exceptions import ConfigValidationError


class HashSite(str, Enum):
    """Where the digest goes relative to the payload."""

    APPEND = "append"
    SEPARATE = "separate"


class HashFormat(str, Enum):
    """Whether the digest is emitted as-is or extended to fill whole units."""

    RAW = "raw"
    PADDED = "padded"


class HashStyle(str, Enum):
    """Site and format folded into one value."""

    APPEND = "append"
    APPEND_PADDED = "append_padded"
    SEPARATE = "separate"
    SEPARATE_PADDED = "separate_padded"


_STYLE_PARTS: dict[HashStyle, tuple[HashSite, HashFormat]] = {
    HashStyle.APPEND: (HashSite.APPEND, HashFormat.RAW),
    HashStyle.APPEND_PADDED: (HashSite.APPEND, HashFormat.PADDED),
    HashStyle.SEPARATE: (HashSite.SEPARATE, HashFormat.RAW),
    HashStyle.SEPARATE_PADDED: (HashSite.SEPARATE, HashFormat.PADDED),
}


class HashConfig(BaseModel):
    """
    Everything needed to hash or verify one stream.

    `format` may be left out: single-byte units default to raw, wider units
    default to padded. A target_size of 0 selects the algorithm's maximum.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.BLAKE2B,
        description="Digest algorithm to drive",
    )
    unit_width: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Width in bytes of each emitted output unit",
    )
    format: HashFormat = Field(
        default=HashFormat.RAW,
        description="raw, or padded with 0x80 00.. up to a whole number of units",
    )
    site: HashSite = Field(
        default=HashSite.SEPARATE,
        description="append the digest to the payload, or emit the digest alone",
    )
    target_size: int = Field(
        default=0,
        ge=0,
        description="Requested digest size in bytes; 0 means the algorithm maximum",
    )
    byteorder: Literal["little", "big"] = Field(
        default="little",
        description="Byte order used to assemble multi-byte units and input elements",
    )
    input_width: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Width in bytes of integer elements yielded by the payload source",
    )

    @model_validator(mode="before")
    @classmethod
    def _default_format(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("format") is None:
            data = dict(data)
            data["format"] = HashFormat.RAW if data.get("unit_width", 1) == 1 else HashFormat.PADDED
        return data

    @model_validator(mode="after")
    def _check_sizes(self) -> "HashConfig":
        params = self.params
        if self.target_size > params.max_digest_size:
            raise ValueError(
                f"target_size {self.target_size} is larger than maximum digest size "
                f"{params.max_digest_size} for {params.name}"
            )
        if self.format is HashFormat.RAW and self.digest_size % self.unit_width != 0:
            raise ValueError(
                f"raw {self.digest_size}-byte digest cannot be split into "
                f"{self.unit_width}-byte units; use the padded format"
            )
        return self

    @property
    def params(self) -> AlgorithmParams:
        return algorithm_params(self.algorithm)

    @property
    def digest_size(self) -> int:
        """Size of the unpadded digest actually produced."""
        return self.target_size or self.params.max_digest_size

    @property
    def padded(self) -> bool:
        return self.format is HashFormat.PADDED

    @property
    def style(self) -> HashStyle:
        for style, parts in _STYLE_PARTS.items():
            if parts == (self.site, self.format):
                return style
        raise AssertionError("unreachable: every site/format pair has a style")

    @classmethod
    def from_style(cls, style: HashStyle, **options: Any) -> "HashConfig":
        """Build a config from a combined style value plus any other options."""
        site, fmt = _STYLE_PARTS[HashStyle(style)]
        return build_hash_config(site=site, format=fmt, **options)


class LoggingConfig(BaseModel):
    """Log level and optional log file for the package loggers."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class DigestStreamSettings(BaseModel):
    """
    Top-level settings document.

    YAML key mapping:
      hash    → hash_config
      logging → logging_config
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        populate_by_name=True,
    )

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    hash_config: HashConfig = Field(default_factory=HashConfig, alias="hash")
    logging_config: LoggingConfig = Field(default_factory=LoggingConfig, alias="logging")


def build_hash_config(**options: Any) -> HashConfig:
    """
    Validate keyword options into a HashConfig.

    Options left as None fall back to the model defaults. pydantic's
    ValidationError is translated into ConfigValidationError so engine
    callers only ever see the package's own exception types.

    Raises:
        ConfigValidationError: Unknown option, bad type, or an impossible size.
    """
    supplied = {key: value for key, value in options.items() if value is not None}
    try:
        return HashConfig.model_validate(supplied)
    except ValidationError as err:
        raise ConfigValidationError(f"Invalid hash configuration:\n{err}") from err


def with_overrides(config: HashConfig, **overrides: Any) -> HashConfig:
    """Copy a config with some fields replaced, re-running validation."""
    merged = config.model_dump()
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return build_hash_config(**merged)
