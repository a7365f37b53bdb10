"""
Text helpers shared by the inventory and transformation phases.

Covers destination file-name sanitizing, bounded title truncation, lenient
date parsing for the date strings Notion writes into its export, and the
path hash used to shard attachment storage.
"""

import hashlib
import re
from datetime import datetime, timezone
from typing import Optional

ILLEGAL_RE = re.compile(r'[/?<>\\:*|"]')
CONTROL_RE = re.compile(r'[\x00-\x1f\x80-\x9f]')
RESERVED_RE = re.compile(r'^\.+$')
WINDOWS_RESERVED_RE = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
WINDOWS_TRAILING_RE = re.compile(r'[. ]+$')
STARTS_WITH_DOT_RE = re.compile(r'^\.')
BAD_LINK_RE = re.compile(r'[\[\]#|^]')

TITLE_LIMIT = 200
ELLIPSIS = "..."

# Formats observed in Notion exports across locales and export settings
DATE_FORMATS = (
    "%B %d, %Y %I:%M %p",
    "%B %d, %Y %H:%M",
    "%B %d, %Y",
    "%b %d, %Y %I:%M %p",
    "%b %d, %Y %H:%M",
    "%b %d, %Y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%Y年%m月%d日 %H:%M",
    "%Y年%m月%d日",
)

TIMEZONE_SUFFIX_RE = re.compile(r'\s*\((?:GMT|UTC)[^)]*\)\s*$')


def sanitize_file_name(name: str) -> str:
    """Strip characters that are illegal in destination names or break links."""
    name = ILLEGAL_RE.sub('', name)
    name = CONTROL_RE.sub('', name)
    name = RESERVED_RE.sub('', name)
    name = WINDOWS_RESERVED_RE.sub('', name)
    name = WINDOWS_TRAILING_RE.sub('', name)
    name = STARTS_WITH_DOT_RE.sub('', name)
    return BAD_LINK_RE.sub('', name)


def truncate_title(title: str, limit: int = TITLE_LIMIT, ellipsis: str = ELLIPSIS) -> str:
    """
    Truncate a title to at most ``limit`` characters at a word boundary.

    Titles within the limit are returned unchanged. Longer titles keep as
    many whole words as fit and get ``ellipsis`` appended. A single word
    longer than the limit is cut at the limit.

    Args:
        title: Title to truncate
        limit: Maximum number of characters kept before the ellipsis
        ellipsis: Suffix appended when truncation occurred

    Returns:
        The original or truncated title
    """
    if len(title) <= limit:
        return title

    kept = []
    length = 0
    for word in title.split(' '):
        added = len(word) + (1 if kept else 0)
        if length + added > limit:
            break
        kept.append(word)
        length += added

    truncated = ' '.join(kept).rstrip() or title[:limit]
    return truncated + ellipsis


def parse_datetime(text: Optional[str]) -> Optional[datetime]:
    """
    Leniently parse a Notion date string.

    A leading "@" (Notion's date mention marker) and a trailing timezone
    annotation are ignored. Unparsable input yields None instead of raising.
    """
    if not text:
        return None

    cleaned = text.strip()
    if cleaned.startswith('@'):
        cleaned = cleaned[1:].strip()
    cleaned = TIMEZONE_SUFFIX_RE.sub('', cleaned)
    if not cleaned:
        return None

    try:
        parsed = datetime.fromisoformat(cleaned)
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def is_date_only(value: datetime) -> bool:
    """True when the value carries no time of day (midnight, no sub-second part)."""
    return (
        value.hour == 0
        and value.minute == 0
        and value.second == 0
        and value.microsecond == 0
    )


def to_timestamp_ms(value: datetime) -> int:
    """Epoch milliseconds for a naive datetime, read as UTC."""
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000)


def format_date(value: datetime) -> str:
    """Render a date as ``YYYY-MM-DD`` or ``YYYY-MM-DD HH:MM`` when it has a time."""
    if is_date_only(value):
        return value.strftime("%Y-%m-%d")
    return value.strftime("%Y-%m-%d %H:%M")


def content_hash(value: str) -> str:
    """MD5 hex digest of a string, used to shard attachment paths."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()
