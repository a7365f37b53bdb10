"""
Resolver Types Module

Records produced by the inventory phase and the link references discovered
during transformation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class FileRecord:
    """Inventory record for one exported Notion page.

    Attributes:
        source_id: Hyphen-free 32-hex Notion id, unique per record
        title: Sanitized, untruncated-then-bounded page title
        parent_ids: Ids of ancestor folders, outermost first
        archive_path: Path of the page inside the export archive
        target_block_id: Destination block id, empty until the destination
            persists the page
        created_at: Page creation time, if exported
        modified_at: Page last-edit time, if exported
        has_content: True if the page body is non-empty
    """
    source_id: str
    title: str
    parent_ids: List[str]
    archive_path: str
    target_block_id: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    has_content: bool = False

    def __post_init__(self):
        """Validate record after creation."""
        if not self.source_id or not isinstance(self.source_id, str):
            raise ValueError(f"source_id must be a non-empty string, got: {self.source_id}")

    @property
    def is_resolved(self) -> bool:
        """True once the destination has issued a block id."""
        return bool(self.target_block_id)


@dataclass
class AttachmentRecord:
    """Inventory record for one non-document archive entry.

    Attributes:
        archive_path: Path inside the export archive, unique per record
        parent_ids: Ids of ancestor folders, outermost first
        display_name: File name without its extension
        extension: Lower-case extension without the dot
        storage_path: Content-hash-sharded path in the destination file system
        reference_path: Path used in generated markdown links
    """
    archive_path: str
    parent_ids: List[str]
    display_name: str
    extension: str
    storage_path: str
    reference_path: str


class LinkKind(Enum):
    """Closed set of link reference variants."""
    RELATION = "relation"
    ATTACHMENT = "attachment"
    IMAGE = "image"

    def __str__(self) -> str:
        return self.value


@dataclass
class LinkReference:
    """A classified anchor-like node.

    ``target`` is the related page id for relations and the attachment
    registry key for attachments and images. ``node`` is the tag the
    reference was discovered on.
    """
    kind: LinkKind
    target: str
    node: Any
    raw_target: str = ""


@dataclass
class InventoryStatistics:
    """Counts describing a populated registry."""
    documents: int = 0
    documents_with_content: int = 0
    resolved_documents: int = 0
    attachments: int = 0
    extensions: Dict[str, int] = field(default_factory=dict)
