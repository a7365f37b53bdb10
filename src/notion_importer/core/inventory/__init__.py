"""
Inventory Module

Phase one of an import: registers every archive entry in the resolver
registry before any page is transformed.
"""

from .scanner import (
    InventoryFailure,
    InventoryResult,
    InventoryScanner,
    extract_title,
    find_page_id,
)

__all__ = [
    'InventoryFailure',
    'InventoryResult',
    'InventoryScanner',
    'extract_title',
    'find_page_id',
]
