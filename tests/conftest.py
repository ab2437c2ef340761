# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for digeststream tests.

Fixtures here are available to every test file automatically.
"""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    A minimal valid settings file.

    Only config_version is required; everything else takes its default.
    """
    config_content = textwrap.dedent("""\
        config_version: "1.0.0"
    """)
    config_file = tmp_path / "digeststream.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def full_config_file(tmp_path: Path) -> Path:
    """A settings file that sets every hash and logging option."""
    config_content = textwrap.dedent("""\
        config_version: "1.0.0"
        hash:
          algorithm: sha256
          unit_width: 8
          format: padded
          site: append
          target_size: 24
          byteorder: big
          input_width: 1
        logging:
          log_level: DEBUG
    """)
    config_file = tmp_path / "full.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        hash:
          algorithm: sha256
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def payload() -> bytes:
    """A payload that is not a multiple of any common block or unit size."""
    return bytes(range(256)) * 3 + b"tail"
