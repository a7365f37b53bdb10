"""
Database Model Types

Typed column/row representation of a Notion collection table, serialized as
a SiYuan attribute view.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ...utils.text import is_date_only, to_timestamp_ms

DEFAULT_PAGE_SIZE = 50
PLACEHOLDER_TEMPLATE = "@@database:{}@@"
EMBED_TEMPLATE = '<div data-type="NodeAttributeView" data-av-id="{}" data-av-type="table"></div>'


class ColumnType(Enum):
    """Semantic column types of an attribute view."""
    BLOCK = "block"
    DATE = "date"
    SELECT = "select"
    MULTI_SELECT = "mSelect"
    CHECKBOX = "checkbox"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value

    @property
    def is_select_like(self) -> bool:
        return self in (ColumnType.SELECT, ColumnType.MULTI_SELECT)

    @classmethod
    def from_marker(cls, marker: Optional[str]) -> "ColumnType":
        """Column type for a Notion header icon class; unknown markers are text."""
        return COLUMN_MARKERS.get(marker or "", cls.TEXT)


# Notion marks each header cell with an svg icon class naming the property type
COLUMN_MARKERS: Dict[str, ColumnType] = {
    "typesTitle": ColumnType.BLOCK,
    "typesDate": ColumnType.DATE,
    "typesCreatedAt": ColumnType.DATE,
    "typesEditedAt": ColumnType.DATE,
    "typesSelect": ColumnType.SELECT,
    "typesStatus": ColumnType.SELECT,
    "typesMultipleSelect": ColumnType.MULTI_SELECT,
    "typesCheckbox": ColumnType.CHECKBOX,
}


def placeholder_for(database_id: str) -> str:
    """Token left in the page body where a database is embedded."""
    return PLACEHOLDER_TEMPLATE.format(database_id)


def embed_for(database_id: str) -> str:
    """Final embed markup that replaces a placeholder token."""
    return EMBED_TEMPLATE.format(database_id)


@dataclass
class SelectOption:
    """A select option; ``ordinal`` follows first-seen order starting at 1."""
    name: str
    ordinal: int

    @property
    def color(self) -> str:
        return str(self.ordinal)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "color": self.color}


@dataclass
class BlockValue:
    block_id: str
    content: str


@dataclass
class DateValue:
    start: datetime
    end: Optional[datetime] = None

    @property
    def is_date_only(self) -> bool:
        return is_date_only(self.start) and (self.end is None or is_date_only(self.end))


@dataclass
class RowValue:
    """One non-empty cell of a column.

    Attributes:
        row_id: Id of the row the cell belongs to
        resolved: False when the row's page was never matched to a block
        value: BlockValue, DateValue, list of option labels, bool or str
    """
    row_id: str
    resolved: bool
    value: Any


@dataclass
class Column:
    """A typed column with its deduplicated options and row values."""
    id: str
    name: str
    column_type: ColumnType
    options: List[SelectOption] = field(default_factory=list)
    values: List[RowValue] = field(default_factory=list)

    def add_option(self, label: str) -> SelectOption:
        """Return the option for ``label``, appending it if first seen."""
        for option in self.options:
            if option.name == label:
                return option
        option = SelectOption(name=label, ordinal=len(self.options) + 1)
        self.options.append(option)
        return option

    def value_to_dict(self, row_value: RowValue) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "keyID": self.id,
            "blockID": row_value.row_id,
            "type": self.column_type.value,
        }
        value = row_value.value

        if self.column_type is ColumnType.BLOCK:
            payload["block"] = {"id": value.block_id, "content": value.content}
            payload["isDetached"] = not row_value.resolved
        elif self.column_type is ColumnType.DATE:
            payload["date"] = {
                "content": to_timestamp_ms(value.start),
                "isNotEmpty": True,
                "hasEndDate": value.end is not None,
                "content2": to_timestamp_ms(value.end) if value.end else 0,
                "isNotEmpty2": value.end is not None,
                "isNotTime": value.is_date_only,
            }
        elif self.column_type.is_select_like:
            payload["mSelect"] = [
                {"content": label, "color": self.add_option(label).color}
                for label in value
            ]
        elif self.column_type is ColumnType.CHECKBOX:
            payload["checkbox"] = {"checked": bool(value)}
        else:
            payload["text"] = {"content": value}

        return payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": {
                "id": self.id,
                "name": self.name,
                "type": self.column_type.value,
                "icon": "",
                "options": [option.to_dict() for option in self.options],
            },
            "values": [self.value_to_dict(value) for value in self.values],
        }


@dataclass
class DatabaseModel:
    """Attribute view extracted from one collection table."""
    id: str
    title: str
    view_id: str
    columns: List[Column] = field(default_factory=list)
    row_ids: List[str] = field(default_factory=list)
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def placeholder(self) -> str:
        return placeholder_for(self.id)

    @property
    def embed(self) -> str:
        return embed_for(self.id)

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize as an attribute view with one default table view."""
        return {
            "spec": 0,
            "id": self.id,
            "name": self.title,
            "keyValues": [column.to_dict() for column in self.columns],
            "viewID": self.view_id,
            "views": [
                {
                    "id": self.view_id,
                    "icon": "",
                    "name": "Table",
                    "hideAttrViewName": False,
                    "type": "table",
                    "table": {
                        "spec": 0,
                        "id": self.view_id,
                        "columns": [{"id": column.id} for column in self.columns],
                        "rowIds": list(self.row_ids),
                        "filters": [],
                        "sorts": [],
                        "pageSize": self.page_size,
                    },
                }
            ],
        }
