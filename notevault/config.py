"""
Configuration for NoteVault.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Record storage configuration."""

    backend: str = "filesystem"  # filesystem, memory
    data_dir: str = "~/Documents/NoteVault"


class ConsistencyConfig(BaseModel):
    """Cascade behaviour on deletes."""

    # Canvases are kept on disk when their note is deleted unless enabled
    delete_canvas_with_note: bool = False
    # Append evicted notes after the root scope instead of keeping their old positions
    normalize_on_folder_delete: bool = False


class SearchConfig(BaseModel):
    """Note search configuration."""

    limit: int = Field(default=20, ge=1)
    include_archived: bool = False


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    consistency: ConsistencyConfig = Field(default_factory=ConsistencyConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            NOTEVAULT_STORAGE_BACKEND: Storage backend (filesystem, memory)
            NOTEVAULT_DATA_DIR: Root data directory
            NOTEVAULT_DELETE_CANVAS_WITH_NOTE: Remove canvases in the note delete cascade
            NOTEVAULT_NORMALIZE_ON_FOLDER_DELETE: Keep the root scope dense on folder delete
            NOTEVAULT_SEARCH_LIMIT: Default maximum search results
            NOTEVAULT_SEARCH_INCLUDE_ARCHIVED: Include archived notes in search
            NOTEVAULT_HOST: Server bind address
            NOTEVAULT_PORT: Server port
            NOTEVAULT_RELOAD: Auto-reload on code changes
            NOTEVAULT_LOG_LEVEL: Log level
            NOTEVAULT_LOG_TO_FILE: Enable file logging
            NOTEVAULT_LOG_DIR: Log directory
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            return value

        return cls(
            storage=StorageConfig(
                backend=get_env("NOTEVAULT_STORAGE_BACKEND", "filesystem"),
                data_dir=get_env("NOTEVAULT_DATA_DIR", "~/Documents/NoteVault"),
            ),
            consistency=ConsistencyConfig(
                delete_canvas_with_note=get_env("NOTEVAULT_DELETE_CANVAS_WITH_NOTE", False),
                normalize_on_folder_delete=get_env("NOTEVAULT_NORMALIZE_ON_FOLDER_DELETE", False),
            ),
            search=SearchConfig(
                limit=get_env("NOTEVAULT_SEARCH_LIMIT", 20),
                include_archived=get_env("NOTEVAULT_SEARCH_INCLUDE_ARCHIVED", False),
            ),
            server=ServerConfig(
                host=get_env("NOTEVAULT_HOST", "127.0.0.1"),
                port=get_env("NOTEVAULT_PORT", 8000),
                reload=get_env("NOTEVAULT_RELOAD", False),
            ),
            logging=LoggingConfig(
                level=get_env("NOTEVAULT_LOG_LEVEL", "INFO"),
                log_to_file=get_env("NOTEVAULT_LOG_TO_FILE", True),
                log_dir=get_env("NOTEVAULT_LOG_DIR", "logs"),
                file_rotation=get_env("NOTEVAULT_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("NOTEVAULT_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("NOTEVAULT_LOG_COMPRESSION", "zip"),
                serialize=get_env("NOTEVAULT_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        # Start with YAML if provided
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Apply env overrides (non-default values)
        default = cls()
        final_dict = {**config_dict}
        if env_config.storage != default.storage:
            final_dict["storage"] = env_config.storage.model_dump()
        if env_config.consistency != default.consistency:
            final_dict["consistency"] = env_config.consistency.model_dump()
        if env_config.search != default.search:
            final_dict["search"] = env_config.search.model_dump()
        if env_config.server != default.server:
            final_dict["server"] = env_config.server.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict) if final_dict else env_config

