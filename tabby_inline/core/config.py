"""Configuration for tabby-inline.

Values come from, highest priority first: keyword overrides, environment
variables (``TABBY_INLINE_*``), a ``.env`` file and the TOML config file
(``~/.tabby-inline/config.toml`` or the path in ``TABBY_INLINE_CONFIG``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from tabby_inline.core.exceptions import ConfigurationError
from tabby_inline.core.languages import DEFAULT_LANGUAGE_MAP

CONFIG_DIR = Path.home() / ".tabby-inline"
CONFIG_FILE = CONFIG_DIR / "config.toml"
CONFIG_FILE_ENV_VAR = "TABBY_INLINE_CONFIG"
COMPLETIONS_PATH = "/v1/completions"
MAX_PORT = 65535


def config_file_path() -> Path:
    if override := os.environ.get(CONFIG_FILE_ENV_VAR):
        return Path(override).expanduser()
    return CONFIG_FILE


class EndpointConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str
    token: str

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}{COMPLETIONS_PATH}"


class TabbyInlineConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TABBY_INLINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str | None = Field(
        default=None, description="Base URL of the completion server"
    )
    token: SecretStr | None = Field(
        default=None, description="Access token sent as 'Authorization: access_token <token>'"
    )
    timeout: float = Field(
        default=30.0, gt=0, description="HTTP timeout for one completion request, in seconds"
    )
    languages: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_LANGUAGE_MAP),
        description="Editor language -> server language id, merged over the defaults",
    )
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(
        default=None, description="Where to write logs; logging is off when unset"
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {value!r}")
        try:
            port = httpx.URL(value).port
        except httpx.InvalidURL as e:
            raise ValueError(f"base_url is not a valid URL: {e}") from e
        if port is not None and not 0 < port <= MAX_PORT:
            raise ValueError(f"base_url port must be between 1 and {MAX_PORT}, got {port}")
        return value

    @field_validator("token", mode="after")
    @classmethod
    def _check_token(cls, value: SecretStr | None) -> SecretStr | None:
        # Sent verbatim in an HTTP header.
        if value is None:
            return None
        raw = value.get_secret_value()
        if not raw.isascii() or any(c.isspace() for c in raw):
            raise ValueError("token must be ASCII without whitespace")
        return value

    @field_validator("languages", mode="after")
    @classmethod
    def _merge_languages(cls, value: dict[str, str]) -> dict[str, str]:
        return {**DEFAULT_LANGUAGE_MAP, **value}

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=config_file_path()),
        )

    @classmethod
    def load(cls, **overrides: Any) -> TabbyInlineConfig:
        return cls(**{k: v for k, v in overrides.items() if v is not None})

    def endpoint(self) -> EndpointConfig:
        """Return the validated endpoint settings.

        Raises:
            ConfigurationError: base URL or token is missing.
        """
        base_url = self.base_url or ""
        token = self.token.get_secret_value() if self.token else ""
        missing = [
            name for name, value in (("base_url", base_url), ("token", token)) if not value
        ]
        if missing:
            raise ConfigurationError(missing)
        return EndpointConfig(base_url=base_url, token=token)
