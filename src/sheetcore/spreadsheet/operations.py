"""
Document events.

This module defines the events a presentation layer sends into a document:
- EditCell: Raw input typed into a cell
- ResizeRow / ResizeColumn: A row or column dragged to a new size
- MoveColumn: A column header dragged to a new display position
- ToggleSort: A click on a column header
- SetFilter / SetGrouping: View state changes from the toolbar
- AddSheet / DeleteSheet / SwitchSheet: Sheet tab actions

Every event serializes to a dictionary with a ``type`` key so event streams can
be recorded and replayed. Events are applied with ``Document.apply``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass
class EditCell:
    """Raw input for the cell at (row, col) of the active sheet."""
    row: int
    col: int
    raw: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "EditCell", "row": self.row, "col": self.col, "raw": self.raw}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditCell":
        return cls(row=data["row"], col=data["col"], raw=data["raw"])


@dataclass
class ResizeRow:
    row: int
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "ResizeRow", "row": self.row, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResizeRow":
        return cls(row=data["row"], height=data["height"])


@dataclass
class ResizeColumn:
    """New width for the column at a display position."""
    column: int
    width: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "ResizeColumn", "column": self.column, "width": self.width}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResizeColumn":
        return cls(column=data["column"], width=data["width"])


@dataclass
class MoveColumn:
    """Move the column at display position ``from_column`` to ``to_column``."""
    from_column: int
    to_column: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "MoveColumn", "from_column": self.from_column, "to_column": self.to_column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveColumn":
        return cls(from_column=data["from_column"], to_column=data["to_column"])


@dataclass
class ToggleSort:
    """Header click on a logical column."""
    column: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "ToggleSort", "column": self.column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToggleSort":
        return cls(column=data["column"])


@dataclass
class SetFilter:
    """Filter substring for a column; an empty value removes the filter."""
    column: int
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "SetFilter", "column": self.column, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetFilter":
        return cls(column=data["column"], value=data["value"])


@dataclass
class SetGrouping:
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "SetGrouping", "column": self.column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetGrouping":
        return cls(column=data.get("column"))


@dataclass
class AddSheet:
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "AddSheet", "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddSheet":
        return cls(name=data.get("name"))


@dataclass
class DeleteSheet:
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteSheet", "index": self.index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteSheet":
        return cls(index=data["index"])


@dataclass
class SwitchSheet:
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "SwitchSheet", "index": self.index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwitchSheet":
        return cls(index=data["index"])


# Type alias for all event types
SheetEvent = Union[
    EditCell, ResizeRow, ResizeColumn, MoveColumn, ToggleSort,
    SetFilter, SetGrouping, AddSheet, DeleteSheet, SwitchSheet,
]

_EVENT_TYPES = {
    cls.__name__: cls
    for cls in (
        EditCell, ResizeRow, ResizeColumn, MoveColumn, ToggleSort,
        SetFilter, SetGrouping, AddSheet, DeleteSheet, SwitchSheet,
    )
}


def event_from_dict(data: Dict[str, Any]) -> SheetEvent:
    """Deserialize an event from dictionary representation.

    Args:
        data: Dictionary with 'type' key indicating event type

    Returns:
        The corresponding event object

    Raises:
        ValueError: If the event type is unknown
    """
    event_type = data.get("type")
    if event_type not in _EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")
    return _EVENT_TYPES[event_type].from_dict(data)
