"""
Configuration management.

Uses Pydantic Settings for environment variable handling and validation,
with an optional config.yaml supplying defaults.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

MIB = 1024 * 1024


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for config.yaml in common locations
        possible_paths = [
            "config.yaml",  # Current directory
            "../../config.yaml",  # Project root from src/logshelf
        ]

        for path in possible_paths:
            if os.path.exists(path):
                config_path = path
                break
        else:
            return {}

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
            return config_data
    return {}


class StorageSettings(BaseSettings):
    """Log file storage configuration."""

    root_path: Path = Field(
        default=Path("./storage/client-logs"),
        description="Flat directory holding one file per ingested log",
    )
    quota_bytes: int = Field(default=500 * MIB, gt=0, description="Maximum total bytes of stored logs (500MB)")
    min_free_bytes: int = Field(default=10 * MIB, ge=0, description="Reject ingest below this much free quota (10MB)")
    log_extension: str = Field(default=".txt", description="Extension of files treated as logs")

    @field_validator("log_extension")
    def validate_log_extension(cls, v: str) -> str:
        """Normalize the extension to a leading dot."""
        v = v.strip()
        if not v:
            raise ValueError("log_extension cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError("log_extension cannot contain path separators")
        return v if v.startswith(".") else f".{v}"

    class Config:
        env_prefix = "LOGSHELF_STORAGE_"


class Settings(BaseSettings):
    """Main application settings."""

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("LOGSHELF_PORT", "PORT", "port"),
        description="Server port",
    )
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Component settings
    storage: StorageSettings = Field(default_factory=StorageSettings)

    class Config:
        env_prefix = "LOGSHELF_"
        case_sensitive = False
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance with config file and env support."""

    # Load config file data
    config_data = load_config_file()

    # Config file provides defaults, env vars override
    if config_data:
        _set_env_from_config(config_data)

    return Settings()


def _set_env_from_config(config_data: Dict[str, Any]) -> None:
    """Set environment variables from config file if not already set."""
    mappings = {
        ("server", "host"): "LOGSHELF_HOST",
        ("server", "port"): "LOGSHELF_PORT",
        ("server", "debug"): "LOGSHELF_DEBUG",
        ("server", "log_level"): "LOGSHELF_LOG_LEVEL",
        ("storage", "root_path"): "LOGSHELF_STORAGE_ROOT_PATH",
        ("storage", "quota_bytes"): "LOGSHELF_STORAGE_QUOTA_BYTES",
        ("storage", "min_free_bytes"): "LOGSHELF_STORAGE_MIN_FREE_BYTES",
        ("storage", "log_extension"): "LOGSHELF_STORAGE_LOG_EXTENSION",
    }

    for (section, key), env_var in mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value is not None:
                os.environ[env_var] = str(value)

    # Lists travel as JSON strings
    if "LOGSHELF_CORS_ORIGINS" not in os.environ:
        cors_origins = (config_data.get("server") or {}).get("cors_origins")
        if cors_origins:
            import json
            os.environ["LOGSHELF_CORS_ORIGINS"] = json.dumps(cors_origins)


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
