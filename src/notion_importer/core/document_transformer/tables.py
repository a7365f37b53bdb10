"""
Table Extractor Module

Turns Notion collection tables into DatabaseModel attribute views and leaves
a placeholder token where each table stood. The generic markdown renderer
would flatten or mangle these tables, so they are taken out of the tree
before rendering and embedded again afterwards.
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag

from ...utils.dom import new_tag, snapshot, text_of
from ...utils.ids import IdGenerator, new_block_id
from ...utils.text import parse_datetime
from ..resolver import ResolverRegistry, get_notion_id, strip_parent_directories
from .database_model import (
    DEFAULT_PAGE_SIZE,
    BlockValue,
    Column,
    ColumnType,
    DatabaseModel,
    DateValue,
    RowValue,
)

logger = logging.getLogger(__name__)

DATE_RANGE_SEPARATOR = "→"
UNTITLED_DATABASE = "Untitled"


class TableExtractor:
    """Extracts every collection table of a page into DatabaseModels."""

    def __init__(
        self,
        registry: ResolverRegistry,
        id_generator: IdGenerator = new_block_id,
        page_size: int = DEFAULT_PAGE_SIZE
    ):
        self.registry = registry
        self.id_generator = id_generator
        self.page_size = page_size

    def extract(self, soup: BeautifulSoup, scope: Tag, page_title: str = "") -> List[DatabaseModel]:
        """Extract all collection tables inside ``scope``.

        Each table region (its ``div.collection-content`` wrapper when present)
        is replaced by a paragraph holding the model's placeholder token.

        Args:
            soup: Document tree, used to create replacement nodes
            scope: Page body, or the article of a page-level database
            page_title: Title used for a page-level table without its own title

        Returns:
            One DatabaseModel per table, in document order
        """
        models = []
        for table in snapshot(scope, 'table', class_='collection-content'):
            wrapper = table.find_parent('div', class_='collection-content')
            title = self._table_title(wrapper) or page_title or UNTITLED_DATABASE

            model = self.build_model(table, title)
            region = wrapper if wrapper is not None else table
            region.replace_with(new_tag(soup, 'p', model.placeholder))
            models.append(model)

            logger.debug(
                "Extracted database '%s' (%d columns, %d rows)",
                title, len(model.columns), len(model.row_ids)
            )
        return models

    def build_model(self, table: Tag, title: str) -> DatabaseModel:
        """Build the typed column model of one table."""
        model = DatabaseModel(
            id=self.id_generator(),
            title=title,
            view_id=self.id_generator(),
            page_size=self.page_size,
        )

        header_row, body_rows = self._split_rows(table)
        if header_row is None:
            return model

        model.columns = self._build_columns(header_row)
        title_index = self._title_index(model.columns)

        for row in body_rows:
            cells = row.find_all(['td', 'th'], recursive=False)
            title_cell = cells[title_index] if title_index < len(cells) else None
            row_id, resolved = self._resolve_row(title_cell)
            model.row_ids.append(row_id)

            for index, column in enumerate(model.columns):
                cell = cells[index] if index < len(cells) else None
                if cell is None:
                    continue
                value = self._cell_value(column, cell, row_id)
                if value is None:
                    continue
                column.values.append(RowValue(row_id=row_id, resolved=resolved, value=value))

        return model

    @staticmethod
    def _table_title(wrapper: Optional[Tag]) -> str:
        if wrapper is None:
            return ""
        heading = wrapper.find(class_='collection-title')
        return text_of(heading) if heading is not None else ""

    @staticmethod
    def _split_rows(table: Tag) -> Tuple[Optional[Tag], List[Tag]]:
        thead = table.find('thead')
        if thead is not None:
            header_row = thead.find('tr')
            tbody = table.find('tbody')
            body_rows = tbody.find_all('tr', recursive=False) if tbody is not None else []
            return header_row, body_rows

        rows = table.find_all('tr')
        if not rows:
            return None, []
        return rows[0], rows[1:]

    def _build_columns(self, header_row: Tag) -> List[Column]:
        columns = []
        for index, header in enumerate(header_row.find_all(['th', 'td'], recursive=False)):
            columns.append(Column(
                id=self.id_generator(),
                name=text_of(header) or f"Column {index + 1}",
                column_type=ColumnType.from_marker(self._marker_of(header)),
            ))
        return columns

    @staticmethod
    def _marker_of(header: Tag) -> Optional[str]:
        icon = header.find('svg')
        if icon is None:
            return None
        for class_name in icon.get('class') or []:
            if class_name.startswith('types'):
                return class_name
        return None

    @staticmethod
    def _title_index(columns: List[Column]) -> int:
        """Index of the single title column; extra title markers become text."""
        title_indexes = [i for i, c in enumerate(columns) if c.column_type is ColumnType.BLOCK]
        if not title_indexes:
            if columns:
                logger.warning("Table has no title column, using '%s'", columns[0].name)
                columns[0].column_type = ColumnType.BLOCK
            return 0

        for extra in title_indexes[1:]:
            columns[extra].column_type = ColumnType.TEXT
        return title_indexes[0]

    def _resolve_row(self, title_cell: Optional[Tag]) -> Tuple[str, bool]:
        """Reuse the block id of the row's page if it is resolved, else mint one."""
        if title_cell is not None:
            anchor = title_cell.find('a', href=True)
            if anchor is not None:
                page_id = get_notion_id(strip_parent_directories(unquote(anchor['href'])))
                block_id = self.registry.resolved_block_id(page_id) if page_id else None
                if block_id:
                    return block_id, True
        return self.id_generator(), False

    def _cell_value(self, column: Column, cell: Tag, row_id: str):
        """Typed value of a cell, or None when the cell is dropped."""
        column_type = column.column_type

        if column_type is ColumnType.BLOCK:
            return BlockValue(block_id=row_id, content=text_of(cell))

        if column_type is ColumnType.DATE:
            return self._date_value(cell)

        if column_type.is_select_like:
            labels = [text_of(span) for span in cell.find_all(class_='selected-value')]
            labels = [label for label in labels if label]
            if not labels and text_of(cell):
                labels = [text_of(cell)]
            if not labels:
                return None
            for label in labels:
                column.add_option(label)
            return labels

        if column_type is ColumnType.CHECKBOX:
            return cell.find(class_='checkbox-on') is not None

        text = text_of(cell)
        return text or None

    @staticmethod
    def _date_value(cell: Tag) -> Optional[DateValue]:
        time_nodes = cell.find_all('time')
        raw = ' '.join(node.get_text() for node in time_nodes) if time_nodes else cell.get_text()

        endpoints = []
        for part in raw.split(DATE_RANGE_SEPARATOR):
            parsed = parse_datetime(part.strip())
            if parsed is not None:
                endpoints.append(parsed)

        if not endpoints:
            return None
        return DateValue(start=endpoints[0], end=endpoints[1] if len(endpoints) > 1 else None)
