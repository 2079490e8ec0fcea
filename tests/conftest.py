from __future__ import annotations

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
import pytest

from tabby_inline.core.config import TabbyInlineConfig
from tests.helpers import BASE_URL, TOKEN, FakePresenter, Notifications

_ORIGINAL_SOURCES = TabbyInlineConfig.__dict__["settings_customise_sources"]


@pytest.fixture(autouse=True, scope="session")
def _patch_tabby_inline_config() -> None:
    """Make TabbyInlineConfig ignore the environment, .env and the TOML file.

    Production code that builds a config inside tests only sees init kwargs.
    """

    def patched_settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    TabbyInlineConfig.settings_customise_sources = classmethod(
        patched_settings_customise_sources
    )  # type: ignore[assignment]


@pytest.fixture
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture
def notifications() -> Notifications:
    return Notifications()


@pytest.fixture
def config() -> TabbyInlineConfig:
    return TabbyInlineConfig(base_url=f"{BASE_URL}/", token=TOKEN)


@pytest.fixture
def real_config_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        TabbyInlineConfig, "settings_customise_sources", _ORIGINAL_SOURCES
    )
