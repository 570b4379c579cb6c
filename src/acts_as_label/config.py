"""
Configuration management for acts_as_label.

This module provides configuration utilities for the label registry,
the backing label store and the lookup API. Values come from built-in
defaults, an optional YAML file and environment variables, in that order.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _deep_update(target: dict[str, object], source: dict[str, object]) -> None:
    """Merge ``source`` into ``target``, descending into nested dictionaries."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_update(current, value)
        else:
            target[key] = value


class LabelConfig:
    """
    Configuration for acts_as_label.

    This class provides access to configuration settings, including the
    default field names for label families, cache policy and the label
    store connection.
    """

    # Default configuration values
    _default_config: dict[str, object] = {
        "registry": {
            "system_label_field": "system_label",
            "label_field": "label",
            "cache_ttl": None,  # seconds; None keeps entries for the process lifetime
        },
        "store": {
            "backend": "memory",  # memory or arangodb
        },
        "database": {
            "url": "http://localhost:8529",
            "database": "acts_as_label",
            "username": "root",
            "password": "",
        },
        "api": {
            "host": "127.0.0.1",
            "port": 8000,
        },
        "logging": {
            "level": "INFO",
            "format": "text",  # text or json
        },
    }

    # Instance configuration values, loaded from file or environment
    _config: dict[str, object] = {}

    # Flag indicating if the configuration has been initialized
    _initialized: bool = False

    @classmethod
    def initialize(cls, config_path: str | None = None) -> None:
        """
        Initialize the configuration.

        Args:
            config_path: Optional path to a YAML configuration file

        Raises:
            ConfigurationError: If the file is missing or is not valid YAML
        """
        # Start with default configuration (deep copy to avoid shared nested dictionaries)
        cls._config = deepcopy(cls._default_config)

        # Load configuration from file if provided
        if config_path:
            cls._load_from_file(config_path)

        # Override with environment variables
        cls._load_from_env()

        cls._initialized = True

    @classmethod
    def _read_yaml(cls, config_path: str) -> dict[str, object]:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Error loading configuration file {config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
        return data

    @classmethod
    def _load_from_file(cls, config_path: str) -> None:
        """
        Load configuration from a YAML file.

        Nested sections are merged into the defaults rather than replacing
        them, so a file only needs to name the values it changes.

        Args:
            config_path: Path to the YAML configuration file
        """
        _deep_update(cls._config, cls._read_yaml(config_path))
        logger.debug("Loaded configuration from %s", config_path)

    @classmethod
    def _load_from_env(cls) -> None:
        """Load configuration from environment variables."""
        env_store = os.environ.get("ACTS_AS_LABEL_STORE")
        if env_store in ("memory", "arangodb"):
            cls._config["store"]["backend"] = env_store

        env_ttl = os.environ.get("ACTS_AS_LABEL_CACHE_TTL")
        if env_ttl:
            try:
                cls._config["registry"]["cache_ttl"] = float(env_ttl)
            except ValueError as e:
                raise ConfigurationError(f"ACTS_AS_LABEL_CACHE_TTL must be a number, got {env_ttl!r}") from e

        # Database connection overrides
        env_map = {
            "ACTS_AS_LABEL_DB_URL": "url",
            "ACTS_AS_LABEL_DB_NAME": "database",
            "ACTS_AS_LABEL_DB_USERNAME": "username",
            "ACTS_AS_LABEL_DB_PASSWORD": "password",
        }
        for env_key, config_key in env_map.items():
            value = os.environ.get(env_key)
            if value:
                cls._config["database"][config_key] = value

        env_level = os.environ.get("ACTS_AS_LABEL_LOG_LEVEL")
        if env_level:
            cls._config["logging"]["level"] = env_level.upper()

        env_format = os.environ.get("ACTS_AS_LABEL_LOG_FORMAT")
        if env_format in ("text", "json"):
            cls._config["logging"]["format"] = env_format

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure the configuration is initialized."""
        if not cls._initialized:
            cls.initialize()

    @classmethod
    def get(cls, key: str, default: object = None) -> object:
        """
        Get a configuration value.

        Args:
            key: The configuration key to retrieve, dotted for nested keys
            default: Default value to return if key is not found

        Returns:
            The configuration value, or default if not found
        """
        cls._ensure_initialized()

        # Support nested keys with dot notation
        if "." in key:
            value = cls._config
            for part in key.split("."):
                if isinstance(value, dict) and part in value:
                    value = value[part]
                else:
                    return default
            return value

        return cls._config.get(key, default)

    @classmethod
    def get_default_fields(cls) -> tuple[str, str]:
        """
        Get the default system label and label field names.

        Returns:
            Tuple of (system_label_field, label_field)
        """
        return (
            cls.get("registry.system_label_field", "system_label"),
            cls.get("registry.label_field", "label"),
        )

    @classmethod
    def get_cache_ttl(cls) -> float | None:
        """
        Get the registry cache TTL.

        Returns:
            TTL in seconds, or None when entries never expire
        """
        ttl = cls.get("registry.cache_ttl")
        return float(ttl) if ttl is not None else None

    @classmethod
    def get_store_backend(cls) -> str:
        """Get the configured label store backend name."""
        return cls.get("store.backend", "memory")

    @classmethod
    def get_database_url(cls) -> str:
        """
        Get the database URL.

        Returns:
            The URL of the database
        """
        return cls.get("database.url", "http://localhost:8529")

    @classmethod
    def get_database_credentials(cls) -> dict:
        """
        Get the database credentials.

        Returns:
            Dictionary containing database credentials
        """
        return {
            "username": cls.get("database.username", "root"),
            "password": cls.get("database.password", ""),
            "database": cls.get("database.database", "acts_as_label"),
        }

    @classmethod
    def load_from_secrets_file(cls, file_path: str) -> None:
        """
        Load configuration from a secrets file.

        This is a convenience method for loading sensitive values, such as
        database passwords, kept outside the main configuration file. A
        missing file is not an error.

        Args:
            file_path: Path to the secrets file
        """
        if not Path(file_path).exists():
            logger.info("Secrets file not found: %s", file_path)
            return

        cls._ensure_initialized()
        _deep_update(cls._config, cls._read_yaml(file_path))
        logger.info("Loaded configuration from secrets file: %s", file_path)
