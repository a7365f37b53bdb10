"""
Exceptions package for Notion Importer.

This package contains custom exception classes for conversion and
configuration error scenarios.
"""

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
)

from .conversion_exceptions import (
    ConversionError,
    MissingBodyError,
    MissingIdError,
    UnrecognizedPropertyTypeError,
)

__all__ = [
    # Configuration exceptions
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    # Conversion exceptions
    "ConversionError",
    "MissingBodyError",
    "MissingIdError",
    "UnrecognizedPropertyTypeError",
]
