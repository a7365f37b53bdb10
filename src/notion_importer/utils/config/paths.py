"""
Configuration file names and locations.
"""


class ConfigPaths:
    """Default file names used by the configuration system."""

    DEFAULT_CONFIG_FILE = "notion-importer.config.json"
    ENV_FILE = ".env"
