"""
JSON schema validation of the importer configuration.
"""

import logging
from typing import Any, Dict, Optional

import jsonschema

from ...exceptions.config_exceptions import ConfigurationValidationError

logger = logging.getLogger(__name__)

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "attachments": {
            "type": "object",
            "properties": {
                "base_dir": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
        "markdown": {
            "type": "object",
            "properties": {
                "single_line_breaks": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "databases": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
                "format": {
                    "type": "string",
                    "enum": ["standard", "json", "detailed"],
                },
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


class SchemaValidator:
    """Validates configuration mappings against ``CONFIG_SCHEMA``."""

    def __init__(self, schema: Optional[Dict[str, Any]] = None) -> None:
        self.schema = schema or CONFIG_SCHEMA

    def validate(self, config: Dict[str, Any], config_file: str = "unknown") -> None:
        """
        Validate ``config``, collecting every violation.

        Raises:
            ConfigurationValidationError: If any violation is found
        """
        validator = jsonschema.Draft7Validator(self.schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: ".".join(str(p) for p in e.absolute_path))
        if not errors:
            return

        validation_errors = [error.message for error in errors]
        invalid_fields = [
            ".".join(str(part) for part in error.absolute_path)
            for error in errors
            if error.absolute_path
        ]
        logger.debug("Configuration has %d validation errors", len(errors))
        raise ConfigurationValidationError(
            "Configuration validation failed",
            config_file,
            validation_errors,
            invalid_fields
        )
