"""
Resolver Registry Module

Cross-document symbol table filled by the inventory phase and read by the
transformation phase. Lookups before registration are legal and fall back to
labels derived from raw archive paths, which keeps forward references safe.
"""

import logging
import re
from typing import Dict, List, Optional, Union

from .notion_ids import strip_notion_id
from .types import AttachmentRecord, FileRecord, InventoryStatistics

logger = logging.getLogger(__name__)

DEFAULT_ATTACHMENT_DIR = "assets/notion"

_TRAILING_DOTS_RE = re.compile(r'[. ]+$')


class ResolverRegistry:
    """Registry of inventoried pages and attachments.

    Each key is written once during inventory. The only later mutation is the
    destination back-patching ``target_block_id`` on a page record.
    """

    def __init__(
        self,
        attachment_dir: str = DEFAULT_ATTACHMENT_DIR,
        single_line_breaks: bool = False
    ):
        """Initialize an empty registry.

        Args:
            attachment_dir: Base directory for attachment reference paths
            single_line_breaks: Collapse blank lines in rendered markdown
        """
        self.ids_to_file_info: Dict[str, FileRecord] = {}
        self.paths_to_attachment_info: Dict[str, AttachmentRecord] = {}
        self.attachment_dir = attachment_dir.strip('/')
        self.single_line_breaks = single_line_breaks

    def register_file(self, record: FileRecord) -> bool:
        """Register a page record.

        Returns:
            True if registered, False if the id was already taken
        """
        if not isinstance(record, FileRecord):
            raise ValueError(f"Expected FileRecord, got {type(record)}")

        existing = self.ids_to_file_info.get(record.source_id)
        if existing is not None:
            logger.warning(
                "Duplicate Notion id %s in %s (already registered from %s)",
                record.source_id, record.archive_path, existing.archive_path
            )
            return False

        self.ids_to_file_info[record.source_id] = record
        logger.debug("Registered page %s: %s", record.source_id, record.title)
        return True

    def register_attachment(self, record: AttachmentRecord) -> bool:
        """Register an attachment record keyed by its archive path."""
        if not isinstance(record, AttachmentRecord):
            raise ValueError(f"Expected AttachmentRecord, got {type(record)}")

        if record.archive_path in self.paths_to_attachment_info:
            logger.warning("Duplicate attachment path: %s", record.archive_path)
            return False

        self.paths_to_attachment_info[record.archive_path] = record
        logger.debug("Registered attachment %s -> %s", record.archive_path, record.reference_path)
        return True

    def get_file(self, source_id: str) -> Optional[FileRecord]:
        return self.ids_to_file_info.get(source_id)

    def get_attachment(self, archive_path: str) -> Optional[AttachmentRecord]:
        return self.paths_to_attachment_info.get(archive_path)

    def find_attachment_path(self, target: str) -> Optional[str]:
        """Find the registry key an (already decoded) link target points at.

        Link targets are relative to the linking page, registry keys are full
        archive paths, so a key matches when it equals the target or ends
        with it on a path-segment boundary.

        Args:
            target: Decoded link target without leading ``../`` segments

        Returns:
            The matching archive path or None
        """
        if not target:
            return None
        if target in self.paths_to_attachment_info:
            return target

        suffix = '/' + target
        for path in self.paths_to_attachment_info:
            if path.endswith(suffix):
                return path
        return None

    def assign_block_id(self, source_id: str, block_id: str) -> None:
        """Back-patch the destination block id of a page, exactly once.

        Raises:
            KeyError: If the page was never inventoried
            ValueError: If a different block id was already assigned
        """
        record = self.ids_to_file_info[source_id]
        if record.target_block_id and record.target_block_id != block_id:
            raise ValueError(
                f"Block id for {source_id} already assigned: {record.target_block_id}"
            )
        record.target_block_id = block_id

    def resolved_block_id(self, source_id: str) -> Optional[str]:
        """Destination block id of a page, or None if not (yet) resolved."""
        record = self.ids_to_file_info.get(source_id)
        if record is None or not record.target_block_id:
            return None
        return record.target_block_id

    def resolve_path_for_entry(self, record: Union[FileRecord, AttachmentRecord]) -> str:
        """Build the hierarchical destination folder path of an entry.

        Each parent id is replaced by the registered page title, or by the
        raw path segment carrying that id with the id removed. Parents that
        resolve to nothing (inline databases have no page) are skipped, and
        trailing dots and spaces are stripped from every folder name.

        Returns:
            Folder path ending in ``/`` (``/`` alone for top-level entries)
        """
        path_names = record.archive_path.split('/')
        folders: List[str] = []

        for parent_id in record.parent_ids:
            parent = self.ids_to_file_info.get(parent_id)
            if parent is not None:
                label = parent.title
            else:
                label = self._label_from_path(path_names, parent_id)
            if not label:
                continue
            label = _TRAILING_DOTS_RE.sub('', label)
            if label:
                folders.append(label)

        return '/'.join(folders) + '/'

    @staticmethod
    def _label_from_path(path_names: List[str], parent_id: str) -> Optional[str]:
        for segment in path_names:
            if parent_id in segment.replace('-', ''):
                return strip_notion_id(segment).strip()
        return None

    def get_all_files(self) -> List[FileRecord]:
        return list(self.ids_to_file_info.values())

    def get_all_attachments(self) -> List[AttachmentRecord]:
        return list(self.paths_to_attachment_info.values())

    def get_statistics(self) -> InventoryStatistics:
        """Summarize the registry contents."""
        stats = InventoryStatistics(
            documents=len(self.ids_to_file_info),
            documents_with_content=sum(1 for r in self.ids_to_file_info.values() if r.has_content),
            resolved_documents=sum(1 for r in self.ids_to_file_info.values() if r.is_resolved),
            attachments=len(self.paths_to_attachment_info),
        )
        for record in self.paths_to_attachment_info.values():
            stats.extensions[record.extension] = stats.extensions.get(record.extension, 0) + 1
        return stats
