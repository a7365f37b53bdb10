"""Tests for Notion id helpers."""

from notion_importer.core.resolver import (
    get_notion_id,
    parse_parent_ids,
    strip_notion_id,
    strip_parent_directories,
)
from notion_importer.core.resolver.notion_ids import split_extension

PAGE_ID = "abcdef0123456789abcdef0123456789"
FOLDER_ID = "0123456789abcdef0123456789abcdef"


class TestGetNotionId:
    def test_id_before_extension(self):
        assert get_notion_id(f"Page {PAGE_ID}.html") == PAGE_ID

    def test_hyphenated_uuid(self):
        assert get_notion_id("abcdef01-2345-6789-abcd-ef0123456789") == PAGE_ID

    def test_id_before_query_string(self):
        assert get_notion_id(f"https://www.notion.so/Page-{PAGE_ID}?pvs=4") == PAGE_ID

    def test_folder_id_is_skipped_for_page_id(self):
        assert get_notion_id(f"Folder {FOLDER_ID}/Page {PAGE_ID}.html") == PAGE_ID

    def test_no_id(self):
        assert get_notion_id("image.png") is None
        assert get_notion_id("") is None


class TestStripNotionId:
    def test_strips_id_and_separator(self):
        assert strip_notion_id(f"Page {PAGE_ID}") == "Page"
        assert strip_notion_id(f"Page {PAGE_ID}.html") == "Page.html"

    def test_name_without_id_is_unchanged(self):
        assert strip_notion_id("Plain name") == "Plain name"


class TestPathHelpers:
    def test_strip_parent_directories(self):
        assert strip_parent_directories("../../Folder/Page.html") == "Folder/Page.html"
        assert strip_parent_directories("Page.html") == "Page.html"

    def test_parse_parent_ids(self):
        path = f"Export/Folder {FOLDER_ID}/Page {PAGE_ID}/image.png"
        assert parse_parent_ids(path) == [FOLDER_ID, PAGE_ID]

    def test_parse_parent_ids_ignores_own_name(self):
        assert parse_parent_ids(f"Page {PAGE_ID}.html") == []

    def test_split_extension(self):
        assert split_extension("Photo.JPG") == ("Photo", "jpg")
        assert split_extension("README") == ("README", "")
