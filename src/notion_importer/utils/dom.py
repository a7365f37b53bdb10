"""
BeautifulSoup helpers shared by the inventory and transformation phases.

Stages snapshot the nodes they touch into a list before mutating the tree,
so node replacement never invalidates a live iterator.
"""

from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

HTML_PARSER = "html.parser"


def parse_html(markup: str) -> BeautifulSoup:
    """Parse a markup string into a tree."""
    return BeautifulSoup(markup, HTML_PARSER)


def has_class(tag: Tag, class_name: str) -> bool:
    """True when ``class_name`` is one of the tag's classes."""
    return class_name in (tag.get('class') or [])


def class_string(tag: Tag) -> str:
    """The tag's class attribute as a single space-separated string."""
    return ' '.join(tag.get('class') or [])


def find_page_body(soup: BeautifulSoup) -> Optional[Tag]:
    """The ``div.page-body`` content container of an exported page."""
    return soup.find('div', class_='page-body')


def find_page_level_collection(soup: BeautifulSoup) -> Optional[Tag]:
    """The article of a database page whose collection table is the page itself."""
    article = soup.find('article')
    if article is None:
        return None
    table = article.find('table', class_='collection-content')
    if table is None or table.find_parent('div', class_='page-body') is not None:
        return None
    return article


def find_content_scope(soup: BeautifulSoup) -> Optional[Tag]:
    """The subtree that holds a page's convertible content, if any."""
    body = find_page_body(soup)
    if body is not None:
        return body
    return find_page_level_collection(soup)


def text_of(node: Tag) -> str:
    """Visible text of a node, trimmed."""
    return node.get_text().strip()


def new_tag(soup: BeautifulSoup, name: str, text: Optional[str] = None, **attrs) -> Tag:
    """Create a detached tag, optionally holding a text node."""
    tag = soup.new_tag(name, attrs=attrs)
    if text is not None:
        tag.string = text
    return tag


def replace_with_text(node: Tag, text: str) -> NavigableString:
    """Replace a node by a plain text node and return the text node."""
    replacement = NavigableString(text)
    node.replace_with(replacement)
    return replacement


def hoist_children(node: Tag) -> None:
    """Move all children of ``node`` to where it was and remove it."""
    node.unwrap()


def next_element_sibling(node: Tag) -> Optional[Tag]:
    """Next sibling that is a tag, skipping text nodes."""
    sibling = node.next_sibling
    while sibling is not None and not isinstance(sibling, Tag):
        sibling = sibling.next_sibling
    return sibling


def snapshot(scope: Tag, *args, **kwargs) -> List[Tag]:
    """``find_all`` materialized into a list before any mutation happens."""
    return list(scope.find_all(*args, **kwargs))
