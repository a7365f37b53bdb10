"""
Notion Importer CLI Package.

Command-line interface for inventorying and converting Notion exports.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
