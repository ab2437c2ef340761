# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

We keep these separate so that callers can catch config-specific failures
without importing the hashing engine. They still share the package-wide
DigestStreamError base so one except clause can catch everything.
"""

from digeststream.errors import DigestStreamError


class ConfigError(DigestStreamError):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a configuration is structurally fine but not acceptable.
    This covers missing or unknown fields, type mismatches, a target digest
    size above the algorithm maximum, raw digests that don't divide into
    whole output units, and padded sizes past the one-unit limit.
    """
