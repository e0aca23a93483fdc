from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from revisor.domain.constants import (
    AUTO_DELETE_DAYS,
    DATA_FILE_NAME,
    DEFAULT_REVISION_INTERVALS,
    STORAGE_KEY,
)


def config_dir() -> Path:
    return Path.home() / ".config/revisor"


def config_file_candidates() -> list[Path]:
    return [config_dir() / "config.toml", Path.home() / ".revisor.toml"]


class AppConfig(BaseSettings):
    """
    Configuration model for revisor.
    Supports loading from:
    1. Manual overrides (CLI)
    2. Environment variables (REVISOR_*)
    3. Config file (~/.config/revisor/config.toml or ~/.revisor.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="REVISOR_",
        extra="ignore",
    )

    # Storage
    data_file: Path = Field(default_factory=lambda: config_dir() / DATA_FILE_NAME)
    storage_key: str = STORAGE_KEY

    # Scheduling
    default_intervals: list[int] = Field(default_factory=lambda: list(DEFAULT_REVISION_INTERVALS))
    retention_days: int = Field(default=AUTO_DELETE_DAYS, ge=1)

    # Output
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
        toml_file = next((f for f in config_file_candidates() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_file", mode="before")
    @classmethod
    def expand_data_file(cls, v: Any) -> Path:
        return Path(v).expanduser()

    # REVISOR_DEFAULT_INTERVALS is read as JSON, e.g. "[1, 2, 4]"
    @field_validator("default_intervals")
    @classmethod
    def check_intervals(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("default_intervals must not be empty")
        if any(n <= 0 for n in v):
            raise ValueError("default_intervals must contain positive day counts")
        return v


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/revisor/config.toml (if exists)
    3. Environment variables (REVISOR_*)
    4. cli_overrides (passed from Typer; None values are ignored)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
