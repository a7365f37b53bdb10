"""
Archive entry access.

The conversion engine only needs a path, an extension and a deferred byte
loader per entry. ``ZipArchive`` provides those for a Notion export zip;
bytes are read from the zip only when an entry is actually parsed.
"""

import logging
import posixpath
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Union

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSION = "html"


@dataclass
class ArchiveEntry:
    """One file inside the export archive.

    Attributes:
        path: Archive path, ``/``-separated, without a leading slash
        loader: Deferred accessor returning the entry bytes
    """
    path: str
    loader: Callable[[], bytes]

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.path)[1][1:].lower()

    @property
    def is_document(self) -> bool:
        return self.extension == DOCUMENT_EXTENSION

    def read_bytes(self) -> bytes:
        return self.loader()

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.loader().decode(encoding, errors="replace")

    @classmethod
    def from_text(cls, path: str, text: str) -> "ArchiveEntry":
        """Build an in-memory entry, mainly for tests and embedding callers."""
        data = text.encode("utf-8")
        return cls(path=path, loader=lambda: data)


class ZipArchive:
    """Lazily reading view over a Notion export zip file."""

    def __init__(self, archive_path: Union[str, Path]):
        self.archive_path = Path(archive_path)

    def entries(self) -> List[ArchiveEntry]:
        """List every file entry in archive order."""
        with zipfile.ZipFile(self.archive_path) as zf:
            names = [info.filename for info in zf.infolist() if not info.is_dir()]

        entries = [ArchiveEntry(path=name, loader=self._loader_for(name)) for name in names]
        logger.debug("Found %d entries in %s", len(entries), self.archive_path)
        return entries

    def _loader_for(self, name: str) -> Callable[[], bytes]:
        def load() -> bytes:
            with zipfile.ZipFile(self.archive_path) as zf:
                return zf.read(name)
        return load
