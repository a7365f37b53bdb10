"""
Configuration management for Notion Importer.

Provides the ConfigManager plus its file, environment and schema helpers.
"""

from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .manager import DEFAULT_CONFIG, ConfigManager, deep_merge
from .paths import ConfigPaths
from .schema_validation import CONFIG_SCHEMA, SchemaValidator

__all__ = [
    'ConfigManager',
    'ConfigPaths',
    'CONFIG_SCHEMA',
    'DEFAULT_CONFIG',
    'EnvironmentHandler',
    'FileOperations',
    'SchemaValidator',
    'deep_merge',
]
