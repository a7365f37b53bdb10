"""Shared test fixtures for Notion Importer tests."""

import pytest

from notion_importer.core.archive import ArchiveEntry
from notion_importer.core.resolver import ResolverRegistry
from notion_importer.utils.ids import SequentialIdGenerator


def as_uuid(notion_id: str) -> str:
    """Hyphenated form Notion uses in element id attributes."""
    return "-".join([
        notion_id[:8], notion_id[8:12], notion_id[12:16], notion_id[16:20], notion_id[20:]
    ])


def build_page(
    page_id: str,
    title: str,
    body: str = "",
    properties: str = "",
    description: str = "",
) -> str:
    """Markup shaped like a page of a Notion HTML export."""
    property_table = (
        f'<table class="properties"><tbody>{properties}</tbody></table>' if properties else ''
    )
    description_node = (
        f'<p class="page-description">{description}</p>' if description else ''
    )
    return (
        f'<html><head><meta charset="utf-8"/><title>{title}</title></head><body>'
        f'<article id="{as_uuid(page_id)}" class="page sans">'
        f'<header><h1 class="page-title">{title}</h1>{description_node}{property_table}</header>'
        f'<div class="page-body">{body}</div>'
        f'</article></body></html>'
    )


def build_database_page(page_id: str, title: str, table: str) -> str:
    """Markup of a page-level database export: the table sits in the article."""
    return (
        f'<html><head><meta charset="utf-8"/><title>{title}</title></head><body>'
        f'<article id="{as_uuid(page_id)}" class="page sans">'
        f'<header><h1 class="page-title">{title}</h1></header>'
        f'{table}'
        f'</article></body></html>'
    )


def build_table(headers, rows) -> str:
    """Collection table markup.

    Args:
        headers: ``(name, marker)`` pairs; marker is the svg class or None
        rows: Lists of cell inner markup
    """
    header_cells = ''.join(
        f'<th>{f"<svg class={marker!r}></svg>" if marker else ""}{name}</th>'
        for name, marker in headers
    )
    body_rows = ''.join(
        '<tr>' + ''.join(f'<td>{cell}</td>' for cell in row) + '</tr>'
        for row in rows
    )
    return (
        f'<table class="collection-content"><thead><tr>{header_cells}</tr></thead>'
        f'<tbody>{body_rows}</tbody></table>'
    )


def property_row(category: str, name: str, value: str) -> str:
    return f'<tr class="property-row property-row-{category}"><th>{name}</th><td>{value}</td></tr>'


@pytest.fixture
def registry():
    """Empty registry with default settings."""
    return ResolverRegistry()


@pytest.fixture
def id_generator():
    """Deterministic block id source."""
    return SequentialIdGenerator()


@pytest.fixture
def page_html():
    return build_page


@pytest.fixture
def database_page_html():
    return build_database_page


@pytest.fixture
def table_html():
    return build_table


@pytest.fixture
def property_html():
    return property_row


@pytest.fixture
def make_entry():
    """Build an in-memory archive entry."""
    return ArchiveEntry.from_text
