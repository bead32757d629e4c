"""
Configuration settings for the posts exporter.

Uses Pydantic Settings to load the export target, connection strings, HTTP
retry policy and logging options. Values are read (highest priority first)
from init kwargs, environment variables, `.env`, and `appsettings.json` in
the working directory. Keys in `appsettings.json` may use PascalCase
(`ExportType`, `ConnectionStrings`) and are matched to fields ignoring case
and underscores.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_SOURCE_URL = "https://jsonplaceholder.typicode.com/posts"
APPSETTINGS_FILE = "appsettings.json"


class MissingConnectionStringError(LookupError):
    """Raised when the named connection entry is not configured."""


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


class AppSettingsJsonSource(PydanticBaseSettingsSource):
    """
    Settings source reading `appsettings.json` from the working directory.

    A missing file contributes nothing.
    """

    def __init__(self, settings_cls: Type[BaseSettings], path: Path | str = APPSETTINGS_FILE):
        super().__init__(settings_cls)
        self.path = Path(path)

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        # Values are resolved in bulk by __call__.
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        if not self.path.is_file():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} must contain a JSON object")

        lookup = {_normalize_key(name): name for name in self.settings_cls.model_fields}
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            field_name = lookup.get(_normalize_key(key))
            if field_name is not None:
                values[field_name] = value
        return values


class Settings(BaseSettings):
    # Export
    export_type: str = Field("json", description="json | csv | sql (case-insensitive).")
    output_dir: str = Field(".", description="Directory for posts.json / posts.csv.")

    # Database
    connection_strings: Dict[str, str] = Field(default_factory=dict)
    connection_name: str = Field("DefaultConnection")

    # Source endpoint
    source_url: str = Field(DEFAULT_SOURCE_URL)
    http_timeout_seconds: float = Field(30.0, gt=0)
    retry_attempts: int = Field(3, ge=0)
    retry_backoff_base: float = Field(2.0, ge=0)

    # Application
    app_env: str = Field("development")
    log_level: str = Field("INFO")
    log_json: bool = Field(False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            AppSettingsJsonSource(settings_cls),
            file_secret_settings,
        )

    def get_connection_string(self, name: Optional[str] = None) -> str:
        """
        Look up a connection string by entry name (defaults to `connection_name`).

        Raises
        ------
        MissingConnectionStringError
            If no entry with that name is configured.
        """
        key = name or self.connection_name
        try:
            return self.connection_strings[key]
        except KeyError:
            raise MissingConnectionStringError(
                f"No connection string configured for '{key}'"
            ) from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = [
    "APPSETTINGS_FILE",
    "AppSettingsJsonSource",
    "DEFAULT_SOURCE_URL",
    "MissingConnectionStringError",
    "Settings",
    "get_settings",
]
