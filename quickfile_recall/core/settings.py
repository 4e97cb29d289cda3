"""QuickFile Recall - Configuration system with Pydantic Settings"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import pydantic_settings
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    DotEnvSettingsSource,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
)
from pydantic_settings.main import SettingsConfigDict

from quickfile_recall.core.config_toml import find_config_file, load_config, settings_overrides
from quickfile_recall.core.exceptions import ConfigError

__all__ = [
    "DEFAULT_MAX_HISTORY_SIZE",
    "Settings",
    "load_settings",
]

DEFAULT_MAX_HISTORY_SIZE = 255
ENV_PREFIX = "QUICKFILE_RECALL_"


class Settings(pydantic_settings.BaseSettings):
    """Application settings with type-safe validation"""

    app_name: str = Field(default="quickfile-recall", min_length=1)
    debug: bool = False
    log_level: str = "WARNING"

    # History settings
    max_history_size: int = DEFAULT_MAX_HISTORY_SIZE

    # Filesystem paths
    storage_dir: str = Field(default_factory=lambda: str(_resolve_app_dir("data")))

    # Terminal host
    editor: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("max_history_size", mode="before")
    @classmethod
    def _default_when_falsy(cls, value: Any) -> Any:
        if not value or value == "0":
            return DEFAULT_MAX_HISTORY_SIZE
        return value

    @field_validator("max_history_size")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(1, value)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[pydantic_settings.BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        del env_settings, dotenv_settings

        model_case_sensitive = settings_cls.model_config.get("case_sensitive")
        case_sensitive = model_case_sensitive if isinstance(model_case_sensitive, bool) else None

        return (
            init_settings,
            EnvSettingsSource(
                settings_cls,
                env_prefix=ENV_PREFIX,
                case_sensitive=case_sensitive,
            ),
            DotEnvSettingsSource(
                settings_cls,
                env_prefix=ENV_PREFIX,
                env_file=_dotenv_paths(settings_cls),
                case_sensitive=case_sensitive,
            ),
            file_secret_settings,
        )

    def storage_dir_path(self) -> Path:
        """Storage directory with ~ expanded"""
        return Path(self.storage_dir).expanduser()


APP_DIR_NAME = "quickfile-recall"


def _xdg_base_dir(env_var_name: str, fallback: Path) -> Path:
    env_value = os.getenv(env_var_name)
    if env_value:
        return Path(env_value).expanduser()
    return fallback


def _app_base_dirs(kind: str) -> Path:
    home = Path.home()
    if kind == "config":
        base = _xdg_base_dir("XDG_CONFIG_HOME", home / ".config")
    elif kind == "data":
        base = _xdg_base_dir("XDG_DATA_HOME", home / ".local" / "share")
    else:
        raise ValueError(f"Unsupported app dir kind: {kind}")

    return base / APP_DIR_NAME


def _resolve_app_dir(kind: str) -> Path:
    return _app_base_dirs(kind)


def _dotenv_paths(settings_cls: type[pydantic_settings.BaseSettings]) -> tuple[Path | str, ...]:
    explicit_env_files = settings_cls.model_config.get("env_file")
    if explicit_env_files is not None:
        if isinstance(explicit_env_files, (str, Path)):
            return (explicit_env_files,)
        return tuple(explicit_env_files)

    return (".env", _app_base_dirs("config") / ".env")


def load_settings(workspace_dir: Path | None = None, **overrides: Any) -> Settings:
    """Build settings for one workspace.

    Values from the nearest ``.quickfile-recall/config.toml`` take precedence
    over environment variables; explicit keyword overrides win over both.

    Raises:
        ConfigError: If a project config file cannot be parsed, or a value
            from any source fails validation.
    """
    config_path = find_config_file(workspace_dir)
    init_values = settings_overrides(load_config(config_path)) if config_path else {}
    init_values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return Settings(**init_values)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
