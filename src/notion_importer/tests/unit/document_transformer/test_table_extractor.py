"""Tests for collection table extraction."""

import logging
from datetime import datetime

import pytest

from notion_importer.core.document_transformer import ColumnType, DateValue, TableExtractor
from notion_importer.core.resolver import FileRecord
from notion_importer.utils.dom import find_content_scope, parse_html

TASK_ONE_ID = "33333333333333333333333333333333"
TASK_TWO_ID = "44444444444444444444444444444444"
RESOLVED_BLOCK = "20240101000000-task001"


def row_link(title: str, notion_id: str) -> str:
    return f'<a href="{title.replace(" ", "%20")}%20{notion_id}.html">{title}</a>'


def select(label: str) -> str:
    return f'<span class="selected-value">{label}</span>'


@pytest.fixture
def task_table(table_html):
    return table_html(
        [("Name", "typesTitle"), ("Status", "typesSelect"), ("Due", "typesDate")],
        [
            [row_link("Task One", TASK_ONE_ID), select("Open"), "<time>March 5, 2024 → March 7, 2024</time>"],
            [row_link("Task Two", TASK_TWO_ID), select("Done"), ""],
            ["Loose row", select("Open"), "<time>2024-03-09 14:30</time>"],
        ],
    )


@pytest.fixture
def resolved_registry(registry):
    registry.register_file(FileRecord(
        source_id=TASK_ONE_ID, title="Task One", parent_ids=[],
        archive_path=f"Tasks/Task One {TASK_ONE_ID}.html",
    ))
    registry.assign_block_id(TASK_ONE_ID, RESOLVED_BLOCK)
    return registry


def extract(markup, registry, id_generator, page_title="Page"):
    soup = parse_html(f'<article><div class="page-body">{markup}</div></article>')
    scope = find_content_scope(soup)
    models = TableExtractor(registry, id_generator).extract(soup, scope, page_title)
    return models, scope


class TestTableExtractor:
    """Test suite for TableExtractor."""

    def test_extracts_typed_columns(self, task_table, resolved_registry, id_generator):
        wrapped = f'<div class="collection-content"><h4 class="collection-title">Tasks</h4>{task_table}</div>'

        models, _ = extract(wrapped, resolved_registry, id_generator)

        assert len(models) == 1
        model = models[0]
        assert model.title == "Tasks"
        assert [c.name for c in model.columns] == ["Name", "Status", "Due"]
        assert [c.column_type for c in model.columns] == [
            ColumnType.BLOCK, ColumnType.SELECT, ColumnType.DATE
        ]

    def test_placeholder_replaces_wrapper(self, task_table, resolved_registry, id_generator):
        wrapped = f'<p>Before</p><div class="collection-content">{task_table}</div><p>After</p>'

        models, scope = extract(wrapped, resolved_registry, id_generator)

        assert scope.find('table') is None
        assert [p.get_text() for p in scope.find_all('p')] == [
            "Before", models[0].placeholder, "After"
        ]
        assert models[0].placeholder == "@@database:20000101000000-0000001@@"

    def test_row_identity(self, task_table, resolved_registry, id_generator):
        models, _ = extract(task_table, resolved_registry, id_generator)
        model = models[0]
        title_column = model.get_column("Name")

        assert model.row_ids[0] == RESOLVED_BLOCK
        assert len(set(model.row_ids)) == 3
        assert [v.resolved for v in title_column.values] == [True, False, False]
        assert title_column.values[1].value.content == "Task Two"
        assert title_column.values[1].value.block_id == model.row_ids[1]

    def test_select_options_in_first_seen_order(self, task_table, registry, id_generator):
        models, _ = extract(task_table, registry, id_generator)
        status = models[0].get_column("Status")

        assert [(o.name, o.color) for o in status.options] == [("Open", "1"), ("Done", "2")]
        assert [v.value for v in status.values] == [["Open"], ["Done"], ["Open"]]

    def test_dates_and_empty_cells(self, task_table, registry, id_generator):
        models, _ = extract(task_table, registry, id_generator)
        due = models[0].get_column("Due")

        assert len(due.values) == 2
        assert due.values[0].value == DateValue(datetime(2024, 3, 5), datetime(2024, 3, 7))
        assert due.values[0].value.is_date_only
        assert due.values[1].value == DateValue(datetime(2024, 3, 9, 14, 30))
        assert not due.values[1].value.is_date_only

    def test_page_title_used_without_collection_title(self, task_table, registry, id_generator):
        models, _ = extract(task_table, registry, id_generator, page_title="Roadmap")

        assert models[0].title == "Roadmap"

    def test_missing_title_marker_promotes_first_column(self, table_html, registry, id_generator, caplog):
        table = table_html([("Label", None), ("Notes", "typesText")], [["a", "b"]])

        with caplog.at_level(logging.WARNING):
            models, _ = extract(table, registry, id_generator)

        assert [c.column_type for c in models[0].columns] == [ColumnType.BLOCK, ColumnType.TEXT]
        assert "no title column" in caplog.text

    def test_extra_title_markers_become_text(self, table_html, registry, id_generator):
        table = table_html([("Name", "typesTitle"), ("Alias", "typesTitle")], [["a", "b"]])

        models, _ = extract(table, registry, id_generator)

        assert [c.column_type for c in models[0].columns] == [ColumnType.BLOCK, ColumnType.TEXT]
        assert models[0].get_column("Alias").values[0].value == "b"

    def test_checkbox_column(self, table_html, registry, id_generator):
        table = table_html(
            [("Name", "typesTitle"), ("Done", "typesCheckbox")],
            [["a", '<div class="checkbox checkbox-on"></div>'], ["b", '<div class="checkbox checkbox-off"></div>']],
        )

        models, _ = extract(table, registry, id_generator)

        assert [v.value for v in models[0].get_column("Done").values] == [True, False]

    def test_multiple_tables_in_document_order(self, table_html, registry, id_generator):
        first = table_html([("Name", "typesTitle")], [["a"]])
        second = table_html([("Name", "typesTitle")], [["b"]])
        wrapped = (
            f'<div class="collection-content"><h4 class="collection-title">One</h4>{first}</div>'
            f'<div class="collection-content"><h4 class="collection-title">Two</h4>{second}</div>'
        )

        models, _ = extract(wrapped, registry, id_generator)

        assert [m.title for m in models] == ["One", "Two"]
        assert models[0].id != models[1].id
