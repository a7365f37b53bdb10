"""
Resolver Module

Cross-document resolution state shared by both import phases.

Components:
- types: FileRecord, AttachmentRecord and link reference variants
- registry: ResolverRegistry symbol table and destination path building
- notion_ids: Notion id extraction and stripping helpers
"""

from .notion_ids import (
    get_notion_id,
    parse_parent_ids,
    strip_notion_id,
    strip_parent_directories,
)

from .registry import DEFAULT_ATTACHMENT_DIR, ResolverRegistry

from .types import (
    AttachmentRecord,
    FileRecord,
    InventoryStatistics,
    LinkKind,
    LinkReference,
)

__all__ = [
    'get_notion_id',
    'parse_parent_ids',
    'strip_notion_id',
    'strip_parent_directories',
    'DEFAULT_ATTACHMENT_DIR',
    'ResolverRegistry',
    'AttachmentRecord',
    'FileRecord',
    'InventoryStatistics',
    'LinkKind',
    'LinkReference',
]
