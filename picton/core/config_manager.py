"""
Configuration management for Picton.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError, ConfigDict, model_validator

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageConfig(BaseModel):
    """Storage account connection settings."""
    connection_string: Optional[str] = None
    account_url: Optional[str] = None
    account_key: Optional[str] = None
    container: Optional[str] = None


class LeaseConfig(BaseModel):
    """Defaults for lease acquisition."""
    duration: Optional[int] = Field(
        default=None,
        ge=15,
        le=60,
        description="Lease duration in seconds; the service default (15s) when unset"
    )
    max_attempts: int = Field(default=1, ge=1, le=10)


class SasConfig(BaseModel):
    """Defaults for shared access signature URIs."""
    default_duration_minutes: int = Field(default=15, gt=0)
    start_skew_minutes: int = Field(
        default=5,
        ge=0,
        description="How far before 'now' the signature becomes valid"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "json"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'picton.blob.leases': 'DEBUG'}"
    )


class PictonConfig(BaseModel):
    """Main Picton configuration schema."""

    storage: StorageConfig = Field(default_factory=StorageConfig)

    lease: LeaseConfig = Field(default_factory=LeaseConfig)

    sas: SasConfig = Field(default_factory=SasConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_storage(self) -> "PictonConfig":
        """A connection string and an account URL are mutually exclusive."""
        if self.storage.connection_string and self.storage.account_url:
            raise ValueError("Specify either storage.connection_string or storage.account_url, not both")
        return self

    model_config = ConfigDict(use_enum_values=True)


class ConfigManager:
    """
    Manages Picton configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (PICTON_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[PictonConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> PictonConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated PictonConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.debug("Loading Picton configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.debug(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.debug(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = PictonConfig(**config_dict)
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        if path.suffix not in ['.yaml', '.yml', '.json']:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        with open(path, 'r') as f:
            try:
                if path.suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ValueError(f"Cannot parse configuration file {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration file {file_path} must contain a mapping, not {type(data).__name__}"
            )
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        # Storage account
        if connection_string := os.getenv("PICTON_CONNECTION_STRING"):
            config.setdefault("storage", {})["connection_string"] = connection_string
        if account_url := os.getenv("PICTON_ACCOUNT_URL"):
            config.setdefault("storage", {})["account_url"] = account_url
        if account_key := os.getenv("PICTON_ACCOUNT_KEY"):
            config.setdefault("storage", {})["account_key"] = account_key
        if container := os.getenv("PICTON_CONTAINER"):
            config.setdefault("storage", {})["container"] = container

        # Lease defaults
        if duration := os.getenv("PICTON_LEASE_DURATION"):
            config.setdefault("lease", {})["duration"] = int(duration)
        if max_attempts := os.getenv("PICTON_LEASE_MAX_ATTEMPTS"):
            config.setdefault("lease", {})["max_attempts"] = int(max_attempts)

        # Logging configuration
        if log_level := os.getenv("PICTON_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_file := os.getenv("PICTON_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def redacted(self) -> Dict[str, Any]:
        """Return the loaded configuration with secrets masked."""
        config_dict = self.get_config().model_dump()

        storage = config_dict["storage"]
        for secret in ("connection_string", "account_key"):
            if storage.get(secret):
                storage[secret] = REDACTED

        return config_dict

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with sensitive data redacted)."""
        if not self._config:
            return

        logger.debug(f"Active configuration: {json.dumps(self.redacted(), indent=2)}")

    def get_config(self) -> PictonConfig:
        """
        Get the loaded configuration.

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> PictonConfig:
        """Reload configuration from the same sources."""
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
