"""Tests for property table parsing."""

import pytest

from notion_importer.core.document_transformer import LinkResolver, PropertyParser, PropertyType
from notion_importer.core.document_transformer.properties import (
    hyphenate_tags,
    parse_number,
    property_type_for,
)
from notion_importer.core.resolver import FileRecord
from notion_importer.exceptions import UnrecognizedPropertyTypeError
from notion_importer.utils.dom import parse_html

RELATED_ID = "55555555555555555555555555555555"


def parse(rows: str, parser=None, entry_path=None):
    soup = parse_html(f'<table class="properties"><tbody>{rows}</tbody></table>')
    return (parser or PropertyParser()).parse(soup, entry_path)


class TestPropertyTypes:
    @pytest.mark.parametrize("category,expected", [
        ("checkbox", PropertyType.CHECKBOX),
        ("created_time", PropertyType.DATE),
        ("multi_select", PropertyType.LIST),
        ("relation", PropertyType.LIST),
        ("auto_increment_id", PropertyType.NUMBER),
        ("status", PropertyType.TEXT),
        ("formula", PropertyType.TEXT),
    ])
    def test_known_categories(self, category, expected):
        assert property_type_for(category) is expected

    def test_unknown_category_raises(self):
        with pytest.raises(UnrecognizedPropertyTypeError) as exc_info:
            property_type_for("verification", "Page.html")

        assert exc_info.value.category == "verification"
        assert exc_info.value.entry_path == "Page.html"


class TestParseNumber:
    @pytest.mark.parametrize("text,expected", [
        ("42", 42),
        ("3.5", 3.5),
        ("1,234", 1234),
        ("-2", -2),
        ("abc", None),
        ("", None),
        ("inf", None),
    ])
    def test_values(self, text, expected):
        result = parse_number(text)
        assert result == expected
        assert type(result) is type(expected)


class TestPropertyParser:
    """Test suite for PropertyParser."""

    def test_no_table_yields_empty_mapping(self):
        assert PropertyParser().parse(parse_html("<div>no properties</div>")) == {}

    def test_scalar_types(self, property_html):
        rows = (
            property_html("checkbox", "Done", '<div class="checkbox checkbox-on"></div>')
            + property_html("checkbox", "Archived", '<div class="checkbox checkbox-off"></div>')
            + property_html("number", "Points", "42")
            + property_html("number", "Broken", "abc")
            + property_html("text", "Summary", "Short summary")
            + property_html("url", "Empty", "")
        )

        front_matter = parse(rows)

        assert front_matter == {
            "Done": True,
            "Archived": False,
            "Points": 42,
            "Summary": "Short summary",
        }
        assert isinstance(front_matter["Points"], int)

    def test_row_order_is_preserved(self, property_html):
        rows = property_html("text", "B", "2") + property_html("text", "A", "1")

        assert list(parse(rows)) == ["B", "A"]

    def test_dates(self, property_html):
        rows = (
            property_html("date", "When", "<time>@March 5, 2024 → March 7, 2024</time>")
            + property_html("created_time", "Created", "<time>March 5, 2024 10:30 AM</time>")
            + property_html("date", "Unknown", "<time>someday</time>")
        )

        assert parse(rows) == {
            "When": "2024-03-05 - 2024-03-07",
            "Created": "2024-03-05 10:30",
        }

    def test_list_values(self, property_html):
        rows = (
            property_html("multi_select", "Labels", '<span>alpha</span><span>beta</span>')
            + property_html("multi_select", "Nothing", "")
        )

        assert parse(rows) == {"Labels": ["alpha", "beta"]}

    def test_tags_are_renamed_and_hyphenated(self, property_html):
        rows = property_html("multi_select", "Tags", '<span>machine learning</span><span>ai</span>')

        assert parse(rows) == {"tags": ["machine-learning", "ai"]}

    def test_unknown_category_fails_the_page(self, property_html):
        with pytest.raises(UnrecognizedPropertyTypeError):
            parse(property_html("verification", "Verified", "yes"), entry_path="Page.html")

    def test_plain_links_are_flattened_to_urls(self, property_html):
        rows = property_html("url", "Site", '<a href="https://example.com">example</a>')

        assert parse(rows) == {"Site": "https://example.com"}

    def test_relations_are_rewritten(self, property_html, registry):
        registry.register_file(FileRecord(
            source_id=RELATED_ID, title="Related", parent_ids=[],
            archive_path=f"Related {RELATED_ID}.html",
        ))
        registry.assign_block_id(RELATED_ID, "20240101000000-related")
        rows = property_html(
            "relation", "Links", f'<a href="Related%20{RELATED_ID}.html">Related</a>'
        )

        front_matter = parse(rows, PropertyParser(LinkResolver(registry)))

        assert front_matter == {"Links": ['((20240101000000-related "Related"))']}


def test_hyphenate_tags_on_scalar():
    assert hyphenate_tags("two words") == "two-words"
    assert hyphenate_tags(3) == 3
