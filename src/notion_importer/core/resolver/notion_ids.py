"""
Helpers for the 32-hex ids Notion embeds in exported file names and links.

Ids appear at the end of a path segment, either as 32 bare hex characters
or in hyphenated UUID form, and are always followed by an extension, a query
string or the end of the segment.
"""

import posixpath
import re
from typing import List, Optional

ID_PATTERN = r'(?:[a-f0-9]{32}|[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})'

_ID_RE = re.compile(rf'({ID_PATTERN})(?=\?|\.|$)')
_STRIP_ID_RE = re.compile(rf'[ -]?{ID_PATTERN}(?=\.|$)')
_PARENT_TRAVERSAL_RE = re.compile(r'^(\.\./)+')


def get_notion_id(value: str) -> Optional[str]:
    """Return the hyphen-free Notion id found at the end of ``value``, if any."""
    match = _ID_RE.search(value)
    if not match:
        return None
    return match.group(1).replace('-', '')


def strip_notion_id(value: str) -> str:
    """Remove the Notion id (and its separating space) from a name."""
    return _STRIP_ID_RE.sub('', value, count=1)


def strip_parent_directories(relative_uri: str) -> str:
    """Drop leading ``../`` segments from a relative link target."""
    return _PARENT_TRAVERSAL_RE.sub('', relative_uri)


def parse_parent_ids(archive_path: str) -> List[str]:
    """Ids of the ancestor folders of an archive entry, outermost first."""
    parent = posixpath.dirname(archive_path)
    ids = []
    for segment in parent.split('/'):
        notion_id = get_notion_id(segment)
        if notion_id:
            ids.append(notion_id)
    return ids


def split_extension(name: str) -> tuple:
    """Split ``name`` into (stem, extension) with the extension lower-cased and dot-free."""
    stem, ext = posixpath.splitext(name)
    return stem, ext[1:].lower()
