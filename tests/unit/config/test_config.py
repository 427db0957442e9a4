import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from tessera.config import (
    AdapterConfig,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    LogFormat,
    LogLevel,
    load_config,
)

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


@pytest.fixture(autouse=True)
def clear_tessera_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("TESSERA_"):
            monkeypatch.delenv(key)


class TestAdapterConfig:
    def test_defaults(self) -> None:
        config = AdapterConfig()

        assert config.pristine is False
        assert config.handle_prefix == "@"
        assert config.import_context is False
        assert config.categories == ("atoms", "molecules", "organisms")
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON
        assert config.environment.autoescape is False

    def test_is_frozen(self) -> None:
        config = AdapterConfig()

        with pytest.raises(ValidationError):
            config.pristine = True  # pyright: ignore[reportAttributeAccessIssue]

    def test_unknown_keys_are_ignored(self) -> None:
        config = AdapterConfig.model_validate({"unknown": 1, "pristine": True})

        assert config.pristine is True

    def test_empty_handle_prefix_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _ = AdapterConfig(handle_prefix="")


class TestLoadConfig:
    def test_defaults_without_sources(self) -> None:
        assert load_config() == AdapterConfig()

    def test_reads_toml_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/project/tessera.toml")
        fs.create_file(
            path,
            contents="""
import_context = true
categories = ["base", "blocks"]

[logging]
level = "debug"
format = "text"
""",
        )

        config = load_config(path)

        assert config.import_context is True
        assert config.categories == ("base", "blocks")
        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format is LogFormat.TEXT

    def test_environment_overrides_file(
        self, fs: "FakeFilesystem", monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = Path("/project/tessera.toml")
        fs.create_file(path, contents='handle_prefix = "$"\npristine = false\n')
        monkeypatch.setenv("TESSERA_PRISTINE", "true")

        config = load_config(path)

        assert config.pristine is True
        assert config.handle_prefix == "$"

    def test_environment_can_be_skipped(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TESSERA_PRISTINE", "true")

        assert load_config(include_env=False).pristine is False

    def test_overrides_take_precedence(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TESSERA_HANDLE_PREFIX", "$")

        config = load_config(overrides={"handle_prefix": "#"})

        assert config.handle_prefix == "#"

    def test_overrides_carry_callables(self) -> None:
        config = load_config(overrides={"filters": {"shout": str.upper}})

        assert config.filters["shout"] is str.upper

    def test_invalid_file_raises_load_error(self, fs: "FakeFilesystem") -> None:
        path = Path("/project/tessera.toml")
        fs.create_file(path, contents="pristine = \n")

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = load_config(path)

        assert exc_info.value.line == 1

    def test_invalid_value_raises_validation_error(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_config(overrides={"handle_prefix": ""})

        error = exc_info.value
        assert error.key == "handle_prefix"
        assert error.value == ""
        assert error.source == "overrides"
        assert isinstance(error, ConfigError)

    def test_validation_error_names_nested_key_and_file(
        self, fs: "FakeFilesystem"
    ) -> None:
        path = Path("/project/tessera.toml")
        fs.create_file(path, contents='[logging]\nlevel = "loud"\n')

        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_config(path)

        assert exc_info.value.key == "logging.level"
        assert exc_info.value.source == str(path)
