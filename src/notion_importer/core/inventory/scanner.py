"""
Inventory Scanner Module

First import phase: one pass over every archive entry that fills the
ResolverRegistry with page and attachment records. Must complete for the
whole archive before any page is transformed, because pages link to each
other by id regardless of archive order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup

from ...exceptions import ConversionError, MissingIdError
from ...utils.dom import find_page_body, find_page_level_collection, parse_html
from ...utils.text import content_hash, parse_datetime, sanitize_file_name, truncate_title
from ..archive import ArchiveEntry
from ..resolver import (
    AttachmentRecord,
    FileRecord,
    ResolverRegistry,
    get_notion_id,
    parse_parent_ids,
)
from ..resolver.notion_ids import split_extension

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
CREATED_TIME_ROW = "property-row-created_time"
LAST_EDITED_TIME_ROW = "property-row-last_edited_time"


def find_page_id(soup: BeautifulSoup) -> Optional[str]:
    """Id of the first element, in document order, whose id attribute is a Notion id."""
    root = soup.body or soup
    for element in root.find_all(True):
        notion_id = get_notion_id(element.get('id') or '')
        if notion_id:
            return notion_id
    return None


def extract_title(soup: BeautifulSoup) -> str:
    """Sanitized, bounded page title read from the ``<title>`` node."""
    # Notion truncates on-page headings mid-word, the <title> keeps the full text
    title_node = soup.find('title')
    raw = title_node.get_text() if title_node is not None else ''
    if not raw:
        return UNTITLED

    cleaned = raw.replace('\n', ' ')
    for char in ':/':
        cleaned = cleaned.replace(char, '-')
    cleaned = cleaned.replace('#', '').strip()

    title = truncate_title(sanitize_file_name(cleaned))
    return title or UNTITLED


@dataclass
class InventoryFailure:
    """An entry that could not be inventoried."""
    entry_path: str
    error: ConversionError


@dataclass
class InventoryResult:
    """Outcome of a full inventory pass."""
    documents: List[FileRecord] = field(default_factory=list)
    attachments: List[AttachmentRecord] = field(default_factory=list)
    failures: List[InventoryFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


class InventoryScanner:
    """Populates a ResolverRegistry from archive entries."""

    def __init__(self, registry: ResolverRegistry):
        self.registry = registry

    def scan(self, entries: Iterable[ArchiveEntry]) -> InventoryResult:
        """Inventory every entry, isolating per-entry failures.

        A failing entry is logged and excluded from the registry; links to it
        degrade during transformation instead of blocking other entries.
        """
        result = InventoryResult()

        for entry in entries:
            try:
                record = self.scan_entry(entry)
            except ConversionError as e:
                logger.error("Skipping %s during inventory: %s", entry.path, e)
                result.failures.append(InventoryFailure(entry.path, e))
                continue

            if isinstance(record, FileRecord):
                if self.registry.register_file(record):
                    result.documents.append(record)
            elif self.registry.register_attachment(record):
                result.attachments.append(record)

        logger.info(
            "Inventory complete: %d pages, %d attachments, %d failures",
            len(result.documents), len(result.attachments), len(result.failures)
        )
        return result

    def scan_entry(self, entry: ArchiveEntry):
        """Build the record for one entry without registering it."""
        if entry.is_document:
            return self.scan_document(entry)
        return self.scan_attachment(entry)

    def scan_document(self, entry: ArchiveEntry) -> FileRecord:
        """Extract id, title, timestamps and content flag of an exported page.

        Raises:
            MissingIdError: If no element carries a Notion id
        """
        soup = parse_html(entry.read_text())

        source_id = find_page_id(soup)
        if source_id is None:
            raise MissingIdError(entry.path)

        return FileRecord(
            source_id=source_id,
            title=extract_title(soup),
            parent_ids=parse_parent_ids(entry.path),
            archive_path=entry.path,
            created_at=self._extract_time(soup, CREATED_TIME_ROW),
            modified_at=self._extract_time(soup, LAST_EDITED_TIME_ROW),
            has_content=self._has_content(soup),
        )

    def scan_attachment(self, entry: ArchiveEntry) -> AttachmentRecord:
        """Derive the hash-sharded destination paths of a non-page entry.

        The hash covers the archive path, not the bytes, so the entry content
        is never read here.
        """
        digest = content_hash(entry.path)
        name = unquote(sanitize_file_name(entry.name))
        display_name, extension = split_extension(name)

        file_name = f"{digest}.{extension}" if extension else digest
        reference_path = f"{self.registry.attachment_dir}/{digest[:2]}/{file_name}"

        return AttachmentRecord(
            archive_path=entry.path,
            parent_ids=parse_parent_ids(entry.path),
            display_name=display_name or name,
            extension=extension,
            storage_path=f"/data/{reference_path}",
            reference_path=reference_path,
        )

    @staticmethod
    def _extract_time(soup: BeautifulSoup, row_class: str):
        row = soup.find('tr', class_=row_class)
        if row is None:
            return None
        time_node = row.find('time')
        if time_node is None:
            return None
        return parse_datetime(time_node.get_text())

    @staticmethod
    def _has_content(soup: BeautifulSoup) -> bool:
        body = find_page_body(soup)
        if body is not None:
            return bool(body.decode_contents().strip())
        return find_page_level_collection(soup) is not None
