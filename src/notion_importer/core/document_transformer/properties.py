"""
Property Parser Module

Reads the property table of an exported page into an ordered front-matter
mapping. Every row is dispatched by its Notion category through a fixed
category-to-type table; categories outside that table make the whole page
fail, while individually empty or unparsable values are simply omitted.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ...exceptions import UnrecognizedPropertyTypeError
from ...utils.dom import new_tag, snapshot, text_of
from ...utils.text import format_date, parse_datetime
from .links import LinkResolver

logger = logging.getLogger(__name__)

PROPERTY_ROW_PREFIX = "property-row-"
TAGS_PROPERTY = "Tags"
TAGS_KEY = "tags"
DATE_RANGE_SEPARATOR = "→"
DATE_JOINER = " - "


class PropertyType(Enum):
    CHECKBOX = "checkbox"
    DATE = "date"
    LIST = "list"
    NUMBER = "number"
    TEXT = "text"


PROPERTY_CATEGORIES: Dict[PropertyType, Tuple[str, ...]] = {
    PropertyType.CHECKBOX: ("checkbox",),
    PropertyType.DATE: ("created_time", "last_edited_time", "date"),
    PropertyType.LIST: ("file", "multi_select", "relation"),
    PropertyType.NUMBER: ("number", "auto_increment_id"),
    PropertyType.TEXT: (
        "email",
        "person",
        "phone_number",
        "text",
        "url",
        "status",
        "select",
        "formula",
        "rollup",
        "last_edited_by",
        "created_by",
    ),
}

CATEGORY_TYPES: Dict[str, PropertyType] = {
    category: property_type
    for property_type, categories in PROPERTY_CATEGORIES.items()
    for category in categories
}


def property_type_for(category: str, entry_path: Optional[str] = None) -> PropertyType:
    """
    Look up the property type of a Notion category.

    Raises:
        UnrecognizedPropertyTypeError: If the category is not known
    """
    property_type = CATEGORY_TYPES.get(category)
    if property_type is None:
        raise UnrecognizedPropertyTypeError(category, entry_path)
    return property_type


def flatten_links(soup: BeautifulSoup, scope: Tag) -> None:
    """Replace every remaining anchor by its raw URL (front matter holds scalars)."""
    for anchor in snapshot(scope, 'a'):
        url = anchor.get('href') or anchor.get_text()
        anchor.replace_with(new_tag(soup, 'span', url))


class PropertyParser:
    """Parses ``table.properties`` rows into front-matter values."""

    def __init__(self, link_resolver: Optional[LinkResolver] = None):
        self.link_resolver = link_resolver

    def parse(
        self,
        soup: BeautifulSoup,
        entry_path: Optional[str] = None,
        root: Optional[Tag] = None
    ) -> Dict[str, Any]:
        """
        Parse the property table of a page.

        Relation and attachment links inside the table are rewritten first,
        then all remaining links are flattened to their URL.

        Args:
            soup: Document tree
            entry_path: Archive path, carried into errors
            root: Subtree holding the table, when detached from ``soup``

        Returns:
            Front-matter mapping in row order (empty if the page has no table)

        Raises:
            UnrecognizedPropertyTypeError: On a row of unknown category
        """
        rows = (root if root is not None else soup).select_one('table.properties > tbody')
        if rows is None:
            return {}

        if self.link_resolver is not None:
            references = self.link_resolver.discover(rows)
            self.link_resolver.rewrite(soup, references, embed_images=False)
        flatten_links(soup, rows)

        front_matter: Dict[str, Any] = {}
        for row in rows.find_all('tr', recursive=False):
            parsed = self.parse_row(row, entry_path)
            if parsed is None:
                continue
            title, content = parsed
            if title == TAGS_PROPERTY:
                title, content = TAGS_KEY, hyphenate_tags(content)
            front_matter[title] = content

        logger.debug("Parsed %d properties", len(front_matter))
        return front_matter

    def parse_row(self, row: Tag, entry_path: Optional[str] = None) -> Optional[Tuple[str, Any]]:
        """Parse one row into ``(title, value)``, or None if the value is dropped."""
        category = self._category_of(row)
        property_type = property_type_for(category, entry_path)

        cells = row.find_all(['th', 'td'], recursive=False)
        if len(cells) < 2:
            return None
        title = text_of(cells[0])
        body = cells[1]

        if property_type is PropertyType.CHECKBOX:
            content = body.find(class_='checkbox-on') is not None
        elif property_type is PropertyType.NUMBER:
            content = parse_number(text_of(body))
        elif property_type is PropertyType.DATE:
            content = parse_date_cell(body)
        elif property_type is PropertyType.LIST:
            items = [text_of(child) for child in body.find_all(True, recursive=False)]
            content = [item for item in items if item] or None
        else:
            content = text_of(body) or None

        if content is None:
            return None
        return title, content

    @staticmethod
    def _category_of(row: Tag) -> str:
        for class_name in row.get('class') or []:
            if class_name.startswith(PROPERTY_ROW_PREFIX):
                return class_name[len(PROPERTY_ROW_PREFIX):]
        return ""


def parse_number(text: str):
    """Integral numbers as int, others as float, None if unparsable."""
    if not text:
        return None
    try:
        value = float(text.replace(',', ''))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_date_cell(body: Tag) -> Optional[str]:
    """Join every parsable date of a cell into one range string."""
    dates = []
    for time_node in body.find_all('time'):
        text = time_node.get_text().replace('@', '')
        for part in text.split(DATE_RANGE_SEPARATOR):
            parsed = parse_datetime(part)
            if parsed is not None:
                dates.append(format_date(parsed))
    if not dates:
        return None
    return DATE_JOINER.join(dates)


def hyphenate_tags(content: Any) -> Any:
    if isinstance(content, str):
        return content.replace(' ', '-')
    if isinstance(content, list):
        return [tag.replace(' ', '-') for tag in content]
    return content
