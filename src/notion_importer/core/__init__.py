"""
Core conversion engine: archive access, the inventory phase, the per-page
transformation phase and the orchestrator running both.
"""

from .archive import ArchiveEntry, ZipArchive
from .import_pipeline import ImportFailure, ImportOrchestrator, ImportReport

__all__ = [
    'ArchiveEntry',
    'ZipArchive',
    'ImportFailure',
    'ImportOrchestrator',
    'ImportReport',
]
