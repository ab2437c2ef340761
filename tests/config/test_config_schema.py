# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

These focus on the pydantic models themselves: defaults, boundary values,
and the cross-field rules between algorithm, unit width and format.
"""

import pytest
from pydantic import ValidationError

from digeststream.algorithms.params import HashAlgorithm
from digeststream.config.exceptions import ConfigValidationError
from digeststream.config.schema import (
    DigestStreamSettings,
    HashConfig,
    HashFormat,
    HashSite,
    HashStyle,
    LoggingConfig,
    build_hash_config,
    with_overrides,
)


class TestHashConfigDefaults:
    def test_defaults(self) -> None:
        config = HashConfig()
        assert config.algorithm is HashAlgorithm.BLAKE2B
        assert config.unit_width == 1
        assert config.format is HashFormat.RAW
        assert config.site is HashSite.SEPARATE
        assert config.byteorder == "little"

    def test_zero_target_resolves_to_maximum(self) -> None:
        assert HashConfig(algorithm=HashAlgorithm.SHA256).digest_size == 32
        assert HashConfig(algorithm=HashAlgorithm.SHA512).digest_size == 64

    def test_wide_units_default_to_padded(self) -> None:
        config = HashConfig(unit_width=8)
        assert config.padded

    def test_explicit_raw_format_is_kept_for_wide_units(self) -> None:
        config = HashConfig(unit_width=8, format=HashFormat.RAW)
        assert not config.padded


class TestHashConfigConstraints:
    def test_target_above_maximum_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HashConfig(algorithm=HashAlgorithm.SHA256, target_size=33)

    def test_target_at_maximum_is_accepted(self) -> None:
        assert HashConfig(algorithm=HashAlgorithm.SHA256, target_size=32).digest_size == 32

    def test_negative_target_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HashConfig(target_size=-1)

    def test_zero_unit_width_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HashConfig(unit_width=0)

    def test_raw_digest_must_divide_into_units(self) -> None:
        with pytest.raises(ValidationError, match="padded format"):
            HashConfig(target_size=20, unit_width=8, format=HashFormat.RAW)

    def test_raw_digest_that_divides_is_accepted(self) -> None:
        config = HashConfig(target_size=24, unit_width=8, format=HashFormat.RAW)
        assert config.digest_size == 24

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HashConfig(salt=b"x")  # type: ignore[call-arg]

    def test_bad_byteorder_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HashConfig(byteorder="middle")  # type: ignore[arg-type]


class TestHashStyle:
    @pytest.mark.parametrize(
        "style, site, fmt",
        [
            (HashStyle.APPEND, HashSite.APPEND, HashFormat.RAW),
            (HashStyle.APPEND_PADDED, HashSite.APPEND, HashFormat.PADDED),
            (HashStyle.SEPARATE, HashSite.SEPARATE, HashFormat.RAW),
            (HashStyle.SEPARATE_PADDED, HashSite.SEPARATE, HashFormat.PADDED),
        ],
    )
    def test_from_style_splits_site_and_format(
        self, style: HashStyle, site: HashSite, fmt: HashFormat
    ) -> None:
        config = HashConfig.from_style(style)
        assert config.site is site
        assert config.format is fmt
        assert config.style is style

    def test_from_style_accepts_other_options(self) -> None:
        config = HashConfig.from_style("separate_padded", algorithm="sha256", unit_width=8)
        assert config.algorithm is HashAlgorithm.SHA256
        assert config.unit_width == 8


class TestBuildHashConfig:
    def test_none_options_fall_back_to_defaults(self) -> None:
        config = build_hash_config(algorithm=None, unit_width=None)
        assert config == HashConfig()

    def test_validation_error_is_wrapped(self) -> None:
        with pytest.raises(ConfigValidationError):
            build_hash_config(algorithm="sha1")

    def test_overrides_revalidate(self) -> None:
        base = build_hash_config(algorithm="sha512", target_size=64)
        with pytest.raises(ConfigValidationError):
            with_overrides(base, algorithm="sha256")

    def test_overrides_replace_fields(self) -> None:
        base = build_hash_config(algorithm="sha256")
        changed = with_overrides(base, site="append")
        assert changed.site is HashSite.APPEND
        assert changed.algorithm is HashAlgorithm.SHA256
        assert base.site is HashSite.SEPARATE


class TestSettingsSchema:
    def test_config_version_is_required(self) -> None:
        with pytest.raises(ValidationError):
            DigestStreamSettings()  # type: ignore[call-arg]

    def test_accepts_field_names_and_aliases(self) -> None:
        by_alias = DigestStreamSettings.model_validate(
            {"config_version": "1.0.0", "hash": {"algorithm": "sha256"}}
        )
        by_name = DigestStreamSettings(
            config_version="1.0.0",
            hash_config=HashConfig(algorithm=HashAlgorithm.SHA256),
        )
        assert by_alias.hash_config == by_name.hash_config

    def test_logging_config_defaults(self) -> None:
        assert LoggingConfig().log_level == "INFO"
