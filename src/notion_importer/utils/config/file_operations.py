"""
File operations for configuration management.

Path resolution, JSON file loading and ``.env`` loading for the Notion
Importer configuration system.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from dotenv import load_dotenv

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
)

logger = logging.getLogger(__name__)


class FileOperations:
    """Resolves configuration paths and loads configuration files."""

    def __init__(self, project_root: Path, env_file: str) -> None:
        """
        Initialize file operations.

        Args:
            project_root: Directory relative paths are resolved against
            env_file: Environment file name
        """
        self.project_root = project_root
        self.env_file = env_file

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve ``path`` against the project root unless it is absolute."""
        path_obj = Path(path)
        if path_obj.is_absolute():
            return path_obj
        return (self.project_root / path_obj).resolve()

    def load_environment_variables(self) -> bool:
        """
        Load the ``.env`` file into the process environment if it exists.

        Variables already set in the environment keep their values.

        Returns:
            True if a file was loaded
        """
        env_file_path = self.resolve_path(self.env_file)
        if not env_file_path.exists():
            logger.debug("Environment file not found at %s, skipping", env_file_path)
            return False

        load_dotenv(env_file_path, override=False)
        logger.debug("Loaded environment variables from %s", env_file_path)
        return True

    def load_json_file(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load and parse a JSON configuration file.

        Raises:
            ConfigurationFileNotFoundError: If the file does not exist
            ConfigurationError: If the file cannot be read or parsed
        """
        resolved_path = self.resolve_path(file_path)

        if not resolved_path.exists():
            raise ConfigurationFileNotFoundError(
                f"Configuration file not found: {resolved_path}",
                str(resolved_path)
            )

        try:
            with open(resolved_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file {resolved_path}: {e}",
                str(resolved_path)
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Error reading configuration file {resolved_path}: {e}",
                str(resolved_path)
            ) from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                str(resolved_path)
            )

        logger.debug("Loaded configuration from %s", resolved_path)
        return config_data
