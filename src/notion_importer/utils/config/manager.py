"""
Main configuration manager for Notion Importer.

Merges built-in defaults, an optional JSON configuration file and
environment variable overrides, validates the result and serves values by
dot-notation key.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...exceptions.config_exceptions import ConfigurationError
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .paths import ConfigPaths
from .schema_validation import SchemaValidator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "attachments": {
        "base_dir": "assets/notion",
    },
    "markdown": {
        "single_line_breaks": False,
    },
    "databases": {
        "page_size": 50,
    },
    "logging": {
        "level": "WARNING",
        "format": "standard",
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


class ConfigManager:
    """
    Configuration manager for Notion Importer.

    Sources, lowest precedence first:
    - built-in defaults
    - ``notion-importer.config.json`` (or the file passed in)
    - ``NOTION_IMPORTER_*`` environment variables, including ones set by ``.env``
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
    ) -> None:
        """
        Initialize the ConfigManager.

        Args:
            config_file: Configuration file; when given it must exist
            project_root: Directory relative paths resolve against (default: cwd)
            load_env: Whether to load a ``.env`` file from the project root
        """
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.explicit_file = config_file is not None
        self.config_file = config_file or ConfigPaths.DEFAULT_CONFIG_FILE

        self._config: Dict[str, Any] = {}
        self._loaded = False

        self.file_ops = FileOperations(self.project_root, ConfigPaths.ENV_FILE)
        self.env_handler = EnvironmentHandler()
        self.schema_validator = SchemaValidator()

        if load_env:
            self.file_ops.load_environment_variables()

    @property
    def config(self) -> Dict[str, Any]:
        """The current configuration, loaded on first access."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load_config(self, force_reload: bool = False, validate: bool = True) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Args:
            force_reload: Reload even if already loaded
            validate: Validate the merged configuration against the schema

        Returns:
            The merged configuration

        Raises:
            ConfigurationFileNotFoundError: If an explicit config file is missing
            ConfigurationValidationError: If the merged configuration is invalid
            ConfigurationError: If a file cannot be read or an override is invalid
        """
        if self._loaded and not force_reload:
            return deepcopy(self._config)

        config_path = self.file_ops.resolve_path(self.config_file)
        file_config: Dict[str, Any] = {}
        if self.explicit_file or config_path.exists():
            logger.debug("Loading configuration from %s", config_path)
            file_config = self.file_ops.load_json_file(config_path)
        else:
            logger.debug("No configuration file at %s, using defaults", config_path)

        merged = deep_merge(DEFAULT_CONFIG, file_config)
        merged = self.env_handler.apply_environment_overrides(merged)

        if validate:
            self.schema_validator.validate(merged, str(config_path))

        self._config = merged
        self._loaded = True
        return deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Key such as ``'attachments.base_dir'``
            default: Value returned when the key is absent
        """
        config = self.config
        try:
            for part in key.split('.'):
                config = config[part]
            return config
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set an in-memory value by dot-notation key."""
        if not self._loaded:
            self.load_config()

        parts = key.split('.')
        current = self._config
        for part in parts[:-1]:
            child = current.setdefault(part, {})
            if not isinstance(child, dict):
                raise ConfigurationError(f"Cannot set '{key}': '{part}' is not a section")
            current = child
        current[parts[-1]] = value
