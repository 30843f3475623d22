"""Tests for perch.config and the lazy top-level API."""

import dataclasses

import pytest

import perch
from perch.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.port == 9200
        assert config.major_version == 8
        assert config.rest_compatibility is True
        assert config.deprecation_cache_size == 128

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AppConfig().port = 1  # type: ignore[misc]


class TestLazyImports:
    @pytest.mark.parametrize("name", perch.__all__)
    def test_exported(self, name: str) -> None:
        assert getattr(perch, name) is not None

    def test_unknown(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'Nope'"):
            perch.Nope  # noqa: B018

    def test_version(self) -> None:
        assert perch.__version__ == "0.1.0"
