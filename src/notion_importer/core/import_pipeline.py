"""
Import Pipeline Module

Drives a full import: the inventory phase over every archive entry, block
id reservation, then the per-page transformation phase. The two phases never
interleave, so links to pages that appear later in the archive still resolve.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..exceptions import ConversionError
from ..utils.ids import IdGenerator, new_block_id
from .archive import ArchiveEntry
from .document_transformer import (
    DEFAULT_PAGE_SIZE,
    DocumentResult,
    DocumentTransformer,
    MarkdownRenderer,
    markdownify_renderer,
)
from .inventory import InventoryResult, InventoryScanner
from .resolver import AttachmentRecord, ResolverRegistry

logger = logging.getLogger(__name__)


@dataclass
class ImportFailure:
    """A page that failed inventory or conversion."""
    entry_path: str
    phase: str
    error: ConversionError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class ImportReport:
    """Outcome of an import run."""
    documents: List[DocumentResult] = field(default_factory=list)
    failures: List[ImportFailure] = field(default_factory=list)
    attachments: List[AttachmentRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


class ImportOrchestrator:
    """Runs both import phases over one archive with a shared registry."""

    def __init__(
        self,
        registry: Optional[ResolverRegistry] = None,
        renderer: MarkdownRenderer = markdownify_renderer,
        id_generator: IdGenerator = new_block_id,
        page_size: int = DEFAULT_PAGE_SIZE,
        reserve_block_ids: bool = True
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: Registry to fill, a fresh one by default
            renderer: Markup-to-markdown function handed to the transformer
            id_generator: Source of block, database and column ids
            page_size: Page size of generated database views
            reserve_block_ids: Assign a block id to every page after
                inventory so relations render as block references
        """
        self.registry = registry if registry is not None else ResolverRegistry()
        self.id_generator = id_generator
        self.reserve = reserve_block_ids
        self.scanner = InventoryScanner(self.registry)
        self.transformer = DocumentTransformer(
            self.registry,
            renderer=renderer,
            id_generator=id_generator,
            page_size=page_size,
        )

    def inventory(self, entries: Iterable[ArchiveEntry]) -> InventoryResult:
        """Phase one: register every entry."""
        return self.scanner.scan(entries)

    def reserve_block_ids(self) -> int:
        """Give every registered page without a block id a fresh one.

        Returns:
            Number of ids assigned
        """
        assigned = 0
        for record in self.registry.get_all_files():
            if record.target_block_id:
                continue
            self.registry.assign_block_id(record.source_id, self.id_generator())
            assigned += 1
        logger.debug("Reserved %d block ids", assigned)
        return assigned

    def convert(self, entries: Iterable[ArchiveEntry], report: Optional[ImportReport] = None) -> ImportReport:
        """
        Phase two: transform every page entry.

        A page failing with a conversion error is recorded in the report and
        the batch continues with the next page.
        """
        report = report if report is not None else ImportReport()

        for entry in entries:
            if not entry.is_document:
                continue
            try:
                report.documents.append(self.transformer.transform(entry))
            except ConversionError as e:
                logger.error("Failed to convert %s: %s", entry.path, e)
                report.failures.append(ImportFailure(entry.path, "convert", e))

        return report

    def run(self, entries: Iterable[ArchiveEntry]) -> ImportReport:
        """Inventory, reserve block ids and convert, in that order."""
        entries = list(entries)
        report = ImportReport()

        inventory = self.inventory(entries)
        report.attachments.extend(inventory.attachments)
        report.failures.extend(
            ImportFailure(failure.entry_path, "inventory", failure.error)
            for failure in inventory.failures
        )

        if self.reserve:
            self.reserve_block_ids()

        failed_paths = {failure.entry_path for failure in inventory.failures}
        self.convert([entry for entry in entries if entry.path not in failed_paths], report)

        logger.info(
            "Import finished: %d documents, %d attachments, %d failures",
            len(report.documents), len(report.attachments), len(report.failures)
        )
        return report
