from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mindflash.domain.constants import DEFAULT_HISTORY_DAYS


def _config_files() -> list[Path]:
    home = Path.home()
    return [home / ".config/mindflash/config.toml", home / ".mindflash.toml"]


class AppConfig(BaseSettings):
    """
    Configuration model for MindFlash.
    Supports loading from:
    1. Environment variables (MINDFLASH_*)
    2. Config file (~/.config/mindflash/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="MINDFLASH_",
        extra="ignore",
    )

    # Paths
    data_file: Path = Field(default_factory=lambda: Path.home() / ".config/mindflash/data.json")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/mindflash/logs")

    # Scheduling
    strict_grades: bool = False  # Raise on unknown grade tokens instead of a null delta

    # Study sessions
    shuffle: bool = True
    seed: int | None = None

    # Analytics
    history_days: int = Field(default=DEFAULT_HISTORY_DAYS, ge=1)

    # Logging: 1 = warnings, 2 = info, 3 = debug
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_file", "log_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/mindflash/config.toml (if exists)
    3. Environment variables (MINDFLASH_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
