# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Settings loader: reads YAML from disk and produces validated, frozen
DigestStreamSettings.

The pipeline is linear:
  1. Read the file as UTF-8 text
  2. Parse it as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Apply the logging section to the package loggers (unless asked not to)
  5. Return the frozen settings object

Any failure stops loading with a clear error. There are no fallback values
beyond the defaults declared on the schema.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from digeststream.config.exceptions import ConfigLoadError, ConfigValidationError
from digeststream.config.schema import DigestStreamSettings, LoggingConfig
from digeststream.logging.logger import configure_logging


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed dict.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def apply_logging_settings(logging_config: LoggingConfig) -> list[str]:
    """
    Push a LoggingConfig onto the package loggers.

    Module loggers are created at import time at INFO, so the configured
    level and log file only take effect once this has run.

    Returns:
        Names of the loggers that were reconfigured.

    Raises:
        ConfigValidationError: If the log level is not a known level name.
    """
    log_file = Path(logging_config.log_file) if logging_config.log_file else None
    try:
        return configure_logging(log_level=logging_config.log_level, log_file=log_file)
    except ValueError as err:
        raise ConfigValidationError(str(err)) from err


def load_settings(config_path: Path, *, apply_logging: bool = True) -> DigestStreamSettings:
    """
    Load and validate a settings file.

    Args:
        config_path: Path to a YAML settings file.
        apply_logging: Apply the `logging` section to the package loggers
            before returning. Pass False to only read the file.

    Returns:
        A frozen DigestStreamSettings instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types, unknown keys,
            impossible digest sizes, unknown log level).
    """
    raw_data = _read_yaml_file(Path(config_path))

    try:
        settings = DigestStreamSettings.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    if apply_logging:
        apply_logging_settings(settings.logging_config)

    return settings
