"""
Environment variable overrides for configuration management.

Maps ``NOTION_IMPORTER_*`` variables onto dot-notation configuration keys
and converts their string values to the key's type.
"""

import logging
import os
from copy import deepcopy
from typing import Any, Dict, Tuple

from ...exceptions.config_exceptions import EnvironmentVariableError

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes', 'on', 'enabled')
FALSE_VALUES = ('false', '0', 'no', 'off', 'disabled')


class EnvironmentHandler:
    """Applies environment variable overrides to a configuration mapping."""

    def get_env_mapping(self) -> Dict[str, Tuple[str, str]]:
        """
        Environment variable name to ``(config key, value type)``.

        Returns:
            Mapping of every supported override
        """
        return {
            'NOTION_IMPORTER_ATTACHMENT_DIR': ('attachments.base_dir', 'string'),
            'NOTION_IMPORTER_SINGLE_LINE_BREAKS': ('markdown.single_line_breaks', 'boolean'),
            'NOTION_IMPORTER_PAGE_SIZE': ('databases.page_size', 'integer'),
            'NOTION_IMPORTER_LOG_LEVEL': ('logging.level', 'level'),
        }

    def convert_env_value(self, value: str, target_type: str = 'string', variable_name: str = None) -> Any:
        """
        Convert an environment variable string to ``target_type``.

        Raises:
            EnvironmentVariableError: If the value cannot be converted
        """
        if target_type == 'boolean':
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise EnvironmentVariableError(
                f"Cannot convert '{value}' to boolean",
                variable_name
            )
        if target_type == 'integer':
            try:
                return int(value)
            except ValueError as e:
                raise EnvironmentVariableError(
                    f"Cannot convert '{value}' to integer: {e}",
                    variable_name
                ) from e
        if target_type == 'level':
            return value.strip().upper()
        return value

    def apply_environment_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return a copy of ``config`` with every set override applied.

        Raises:
            EnvironmentVariableError: If an override has an invalid value
        """
        result = deepcopy(config)

        for env_var, (config_key, target_type) in self.get_env_mapping().items():
            env_value = os.getenv(env_var)
            if env_value is None or env_value == '':
                continue
            converted = self.convert_env_value(env_value, target_type, env_var)
            self._set_nested_value(result, config_key, converted)
            logger.debug("Applied environment override: %s -> %s", env_var, config_key)

        return result

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key_path: str, value: Any) -> None:
        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value
