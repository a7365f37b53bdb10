"""
Structural normalizers for exported Notion page bodies.

Each normalizer rewrites one Notion markup idiom into something the markdown
renderer handles. They are idempotent and independent of each other, so
``normalize`` may run them in any order. Every normalizer snapshots the
nodes it touches before mutating the tree.
"""

import logging
import re
from typing import Callable, List

from bs4 import BeautifulSoup, NavigableString, Tag

from ...utils.dom import (
    class_string,
    has_class,
    hoist_children,
    new_tag,
    next_element_sibling,
    replace_with_text,
    snapshot,
    text_of,
)

logger = logging.getLogger(__name__)

Normalizer = Callable[[BeautifulSoup, Tag], None]

TOGGLE_HEADING_SIZES = {
    "1.875em": "h1",
    "1.5em": "h2",
    "1.25em": "h3",
}

CALLOUT_CLASS = "callout"
BOOKMARK_CLASS = "bookmark"
CALLOUT_MARKER = "[!important]"
BOOKMARK_MARKER = "[!info]"
WRAPPER_SELECTORS = ("div.indented", "details")

_FIRST_SENTENCE_RE = re.compile(r'^[^.?!\n]*[.?!]?')


def denest_formatting(soup: BeautifulSoup, scope: Tag) -> None:
    """Hoist the children of ``strong``/``em`` nested in a span of the same kind."""
    for tag_name in ('strong', 'em'):
        for element in snapshot(scope, tag_name):
            if element.parent is None or element.parent.name == tag_name:
                continue
            nested = element.find(tag_name)
            while nested is not None:
                hoist_children(nested)
                nested = element.find(tag_name)


def _is_callout_like(node: Tag) -> bool:
    classes = class_string(node)
    return CALLOUT_CLASS in classes or BOOKMARK_CLASS in classes


def _quote_block(soup: BeautifulSoup, lines: List) -> Tag:
    quote = new_tag(soup, 'blockquote', **{'class': CALLOUT_CLASS})
    for index, line in enumerate(lines):
        if index:
            quote.append(new_tag(soup, 'br'))
        if isinstance(line, Tag):
            quote.append(line)
        else:
            quote.append(NavigableString(line))
    return quote


def _replace_with_quote(soup: BeautifulSoup, node: Tag, lines: List) -> None:
    separate = False
    sibling = next_element_sibling(node)
    if sibling is not None and _is_callout_like(sibling):
        separate = True

    quote = _quote_block(soup, lines)
    node.replace_with(quote)
    if separate:
        quote.insert_after(new_tag(soup, 'br'))


def convert_bookmarks(soup: BeautifulSoup, scope: Tag) -> None:
    """Turn bookmark boxes into ``[!info]`` quote blocks with title, first sentence and link."""
    for bookmark in snapshot(scope, 'a', class_=BOOKMARK_CLASS):
        if not has_class(bookmark, 'source'):
            continue
        url = bookmark.get('href') or ''
        title_node = bookmark.find('div', class_='bookmark-title')
        description_node = bookmark.find('div', class_='bookmark-description')

        title = text_of(title_node) if title_node is not None else ''
        description = text_of(description_node) if description_node is not None else ''
        first_sentence = _FIRST_SENTENCE_RE.match(description).group(0)

        link = new_tag(soup, 'a', url, href=url)
        _replace_with_quote(soup, bookmark, [f"{BOOKMARK_MARKER} {title}".rstrip(), first_sentence, link])


def convert_callouts(soup: BeautifulSoup, scope: Tag) -> None:
    """Turn callout figures into ``[!important]`` quote blocks holding their text."""
    for callout in snapshot(scope, 'figure', class_=CALLOUT_CLASS):
        parts = callout.find_all(True, recursive=False)
        description = text_of(parts[1]) if len(parts) > 1 else text_of(callout)
        _replace_with_quote(soup, callout, [CALLOUT_MARKER, description])


def strip_wrappers(soup: BeautifulSoup, scope: Tag) -> None:
    """Remove indentation and disclosure wrappers, keeping their content in place."""
    for selector in WRAPPER_SELECTORS:
        for wrapper in scope.select(selector):
            hoist_children(wrapper)


def promote_toggle_headings(soup: BeautifulSoup, scope: Tag) -> None:
    """Replace toggle summaries styled at a heading size with real headings."""
    for summary in snapshot(scope, 'summary'):
        style = summary.get('style')
        if not style:
            continue
        for size, heading in TOGGLE_HEADING_SIZES.items():
            if size in style:
                summary.replace_with(new_tag(soup, heading, summary.get_text()))
                break


def merge_adjacent_lists(soup: BeautifulSoup, scope: Tag) -> None:
    """Merge runs of adjacent same-class ``ul``/``ol`` into the first list of the run."""
    for tag_name in ('ul', 'ol'):
        for head in snapshot(scope, tag_name):
            if head.parent is None:
                continue
            sibling = next_element_sibling(head)
            while (
                sibling is not None
                and sibling.name == tag_name
                and class_string(sibling) == class_string(head)
            ):
                following = next_element_sibling(sibling)
                for item in list(sibling.find_all(True, recursive=False)):
                    head.append(item.extract())
                sibling.extract()
                sibling = following


def convert_checkboxes(soup: BeautifulSoup, scope: Tag) -> None:
    """Replace to-do checkbox markers with literal ``[x] `` / ``[ ] `` text."""
    for checkbox in scope.select('.checkbox.checkbox-on'):
        replace_with_text(checkbox, '[x] ')
    for checkbox in scope.select('.checkbox.checkbox-off'):
        replace_with_text(checkbox, '[ ] ')


def encode_newlines(soup: BeautifulSoup, scope: Tag) -> None:
    """Turn newlines in text into ``<br/>`` everywhere but code, and the reverse in code."""
    for text in snapshot(scope, string=True):
        if type(text) is not NavigableString or '\n' not in text:
            continue
        if not text.strip() or text.find_parent('code') is not None:
            continue

        lines = str(text).split('\n')
        anchor = NavigableString(lines[0])
        text.replace_with(anchor)
        for line in lines[1:]:
            br = new_tag(soup, 'br')
            anchor.insert_after(br)
            anchor = NavigableString(line)
            br.insert_after(anchor)

    for code in snapshot(scope, 'code'):
        for br in snapshot(code, 'br'):
            replace_with_text(br, '\n')


def strip_date_markers(soup: BeautifulSoup, scope: Tag) -> None:
    """Remove the ``@`` Notion puts in front of date mentions."""
    for time_node in snapshot(scope, 'time'):
        text = time_node.get_text()
        if '@' in text:
            time_node.string = text.replace('@', '')


def convert_equations(soup: BeautifulSoup, scope: Tag) -> None:
    """Replace rendered KaTeX boxes with their TeX source wrapped in ``$``."""
    for katex in snapshot(scope, class_='katex'):
        if katex.parent is None:
            continue
        annotation = katex.find('annotation')
        if annotation is None:
            continue
        replace_with_text(katex, f"${annotation.get_text()}$")


def rewrite_in_page_anchors(soup: BeautifulSoup, scope: Tag) -> None:
    """Point table-of-contents links at the heading text they name."""
    for anchor in snapshot(scope, 'a', href=True):
        if anchor['href'].startswith('#'):
            anchor['href'] = '#' + anchor.get_text()


def remove_invalid_nodes(soup: BeautifulSoup, scope: Tag) -> None:
    """Drop external scripts and stylesheet links."""
    for script in snapshot(scope, 'script', src=True):
        script.decompose()
    for link in snapshot(scope, 'link'):
        if 'stylesheet' in (link.get('rel') or []):
            link.decompose()


def flatten_user_mentions(soup: BeautifulSoup, scope: Tag) -> None:
    """Reduce user mentions (avatar plus name) to the name."""
    for user in snapshot(scope, 'span', class_='user'):
        replace_with_text(user, user.get_text())


STRUCTURAL_NORMALIZERS: List[Normalizer] = [
    denest_formatting,
    convert_bookmarks,
    convert_callouts,
    flatten_user_mentions,
    encode_newlines,
    strip_date_markers,
    convert_equations,
    strip_wrappers,
    promote_toggle_headings,
    merge_adjacent_lists,
    convert_checkboxes,
    rewrite_in_page_anchors,
    remove_invalid_nodes,
]


def normalize(soup: BeautifulSoup, scope: Tag) -> None:
    """Run every structural normalizer over ``scope``."""
    for normalizer in STRUCTURAL_NORMALIZERS:
        normalizer(soup, scope)
        logger.debug("Applied normalizer %s", normalizer.__name__)
