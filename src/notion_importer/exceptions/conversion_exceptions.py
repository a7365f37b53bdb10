"""
Conversion-related exceptions for Notion Importer.

Every exception in this module is fatal for a single document only. The
import orchestrator catches them per entry so one broken page never aborts
the batch or the registry that was already built.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for document conversion failures."""

    def __init__(self, message: str, entry_path: Optional[str] = None) -> None:
        """
        Initialize conversion error.

        Args:
            message: Error description
            entry_path: Archive path of the entry that failed
        """
        super().__init__(message)
        self.entry_path = entry_path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.entry_path:
            msg = f"{msg} (entry: {self.entry_path})"
        return msg


class MissingBodyError(ConversionError):
    """Raised when a document lacks its page body container."""

    def __init__(self, entry_path: Optional[str] = None):
        super().__init__("Page body was not found", entry_path)


class MissingIdError(ConversionError):
    """Raised when no Notion id can be recovered from a document."""

    def __init__(self, entry_path: Optional[str] = None):
        super().__init__("No Notion id found", entry_path)


class UnrecognizedPropertyTypeError(ConversionError):
    """Raised when a property row carries an unknown Notion property category."""

    def __init__(self, category: Optional[str], entry_path: Optional[str] = None):
        message = f"Unrecognized property type '{category}'"
        super().__init__(message, entry_path)
        self.category = category
