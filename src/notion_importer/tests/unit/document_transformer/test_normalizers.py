"""Tests for the structural normalizers."""

from notion_importer.core.document_transformer import normalize
from notion_importer.core.document_transformer.normalizers import (
    convert_bookmarks,
    convert_callouts,
    convert_checkboxes,
    convert_equations,
    denest_formatting,
    encode_newlines,
    flatten_user_mentions,
    merge_adjacent_lists,
    promote_toggle_headings,
    remove_invalid_nodes,
    rewrite_in_page_anchors,
    strip_date_markers,
    strip_wrappers,
)
from notion_importer.utils.dom import find_page_body, parse_html

BOOKMARK = (
    '<figure><a href="https://example.com" class="bookmark source">'
    '<div><div class="bookmark-title">Example</div>'
    '<div class="bookmark-description">First sentence. Second one.</div></div>'
    '<div class="bookmark-href">https://example.com</div></a></figure>'
)
CALLOUT = (
    '<figure class="block-color-gray_background callout">'
    '<div style="font-size:1.5em"><span class="icon">💡</span></div>'
    '<div style="width:100%">Remember this</div></figure>'
)


def body_of(markup: str):
    soup = parse_html(f'<div class="page-body">{markup}</div>')
    return soup, find_page_body(soup)


def contents(node):
    return [str(child) for child in node.contents]


class TestFormatting:
    def test_denest_strong(self):
        soup, body = body_of('<p><strong>a <strong>b</strong> c</strong></p>')

        denest_formatting(soup, body)

        assert str(body.p) == '<p><strong>a b c</strong></p>'

    def test_denest_is_idempotent(self):
        soup, body = body_of('<p><em>x <em>y <em>z</em></em></em></p>')

        denest_formatting(soup, body)
        once = str(body)
        denest_formatting(soup, body)

        assert str(body) == once
        assert len(body.find_all('em')) == 1


class TestQuoteBlocks:
    """Test suite for bookmark and callout conversion."""

    def test_bookmark(self):
        soup, body = body_of(BOOKMARK)

        convert_bookmarks(soup, body)

        quote = body.find('blockquote')
        assert contents(quote) == [
            '[!info] Example',
            '<br/>',
            'First sentence.',
            '<br/>',
            '<a href="https://example.com">https://example.com</a>',
        ]

    def test_callout(self):
        soup, body = body_of(CALLOUT)

        convert_callouts(soup, body)

        assert body.find('figure') is None
        assert contents(body.find('blockquote')) == ['[!important]', '<br/>', 'Remember this']

    def test_adjacent_callouts_are_separated(self):
        soup, body = body_of(CALLOUT + CALLOUT)

        convert_callouts(soup, body)

        assert [child.name for child in body.children] == ['blockquote', 'br', 'blockquote']

    def test_callout_before_bookmark_is_separated(self):
        soup, body = body_of(CALLOUT + '<a href="https://example.com" class="bookmark source">x</a>')

        convert_callouts(soup, body)
        convert_bookmarks(soup, body)

        assert [child.name for child in body.children] == ['blockquote', 'br', 'blockquote']


class TestStructure:
    """Test suite for wrapper, heading and list normalizers."""

    def test_strip_wrappers(self):
        soup, body = body_of('<div class="indented"><p>a</p></div><details><p>b</p></details>')

        strip_wrappers(soup, body)

        assert [child.name for child in body.children] == ['p', 'p']

    def test_toggle_headings(self):
        soup, body = body_of(
            '<summary style="font-weight:600;font-size:1.5em;line-height:1.3">Section</summary>'
            '<summary style="font-size:1.875em">Top</summary>'
            '<summary>Plain toggle</summary>'
        )

        promote_toggle_headings(soup, body)

        assert contents(body) == ['<h2>Section</h2>', '<h1>Top</h1>', '<summary>Plain toggle</summary>']

    def test_merge_adjacent_lists(self):
        soup, body = body_of(
            '<ul class="bulleted-list"><li>a</li></ul>'
            '<ul class="bulleted-list"><li>b</li></ul>'
            '<ul class="bulleted-list"><li>c</li></ul>'
            '<ol class="numbered-list"><li>d</li></ol>'
        )

        merge_adjacent_lists(soup, body)

        assert [child.name for child in body.children] == ['ul', 'ol']
        assert [li.get_text() for li in body.ul.find_all('li')] == ['a', 'b', 'c']

    def test_lists_with_different_classes_are_kept(self):
        soup, body = body_of(
            '<ul class="bulleted-list"><li>a</li></ul><ul class="to-do-list"><li>b</li></ul>'
        )

        merge_adjacent_lists(soup, body)

        assert len(body.find_all('ul')) == 2

    def test_merge_is_idempotent(self):
        soup, body = body_of('<ol><li>1</li></ol><ol><li>2</li></ol>')

        merge_adjacent_lists(soup, body)
        once = str(body)
        merge_adjacent_lists(soup, body)

        assert str(body) == once


class TestInlineNormalizers:
    """Test suite for text-level normalizers."""

    def test_checkboxes(self):
        soup, body = body_of(
            '<ul class="to-do-list">'
            '<li><div class="checkbox checkbox-on"></div><span>Done</span></li>'
            '<li><div class="checkbox checkbox-off"></div><span>Open</span></li>'
            '</ul>'
        )

        convert_checkboxes(soup, body)

        assert [li.get_text() for li in body.find_all('li')] == ['[x] Done', '[ ] Open']

    def test_newlines_outside_and_inside_code(self):
        soup, body = body_of('<p>line one\nline two</p><pre><code>a\nb<br/>c</code></pre>')

        encode_newlines(soup, body)

        assert contents(body.p) == ['line one', '<br/>', 'line two']
        assert body.code.get_text() == 'a\nb\nc'
        assert body.code.find('br') is None

    def test_whitespace_between_blocks_is_untouched(self):
        soup, body = body_of('<p>a</p>\n<p>b</p>')

        encode_newlines(soup, body)

        assert body.find('br') is None

    def test_date_markers(self):
        soup, body = body_of('<p>Due <time>@March 5, 2024</time></p>')

        strip_date_markers(soup, body)

        assert body.time.get_text() == 'March 5, 2024'

    def test_equations(self):
        soup, body = body_of(
            '<figure class="equation"><span class="katex"><span class="katex-mathml"><math>'
            '<semantics><mrow></mrow><annotation encoding="application/x-tex">E=mc^2</annotation>'
            '</semantics></math></span><span class="katex-html">rendered</span></span></figure>'
        )

        convert_equations(soup, body)

        assert body.get_text() == '$E=mc^2$'

    def test_in_page_anchors(self):
        soup, body = body_of('<a href="#1f2e-3d">Introduction</a><a href="https://example.com">site</a>')

        rewrite_in_page_anchors(soup, body)

        assert [a['href'] for a in body.find_all('a')] == ['#Introduction', 'https://example.com']

    def test_invalid_nodes(self):
        soup, body = body_of(
            '<script src="app.js"></script><link rel="stylesheet" href="style.css"/>'
            '<script>inline()</script><p>kept</p>'
        )

        remove_invalid_nodes(soup, body)

        assert [child.name for child in body.children] == ['script', 'p']

    def test_user_mentions(self):
        soup, body = body_of('<p>By <span class="user"><img class="user-icon" src="a.png"/>Ada Lovelace</span></p>')

        flatten_user_mentions(soup, body)

        assert body.p.find('img') is None
        assert body.p.get_text() == 'By Ada Lovelace'


def test_normalize_is_idempotent():
    soup, body = body_of(
        '<div class="indented"><p><strong>a <strong>b</strong></strong></p></div>'
        '<ul class="bulleted-list"><li>x</li></ul><ul class="bulleted-list"><li>y</li></ul>'
        + CALLOUT
    )

    normalize(soup, body)
    once = str(body)
    normalize(soup, body)

    assert str(body) == once
