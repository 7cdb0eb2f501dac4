from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Importance, TodoItem, utcnow

# Shared type for incoming deadline which can be a date, datetime, or ISO8601 string
DeadlineInput = Union[date, datetime, str]

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

_REQUEST_CONFIG = dict(alias_generator=to_camel, populate_by_name=True)


def _parse_deadline(value: Optional[DeadlineInput]) -> Optional[datetime]:
    """
    Normalize deadline input into a datetime.
    - If value is a string, parse via datetime.fromisoformat; date-only strings become 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "Invalid deadline format. Use ISO8601 date or datetime string (e.g., '2025-01-31' or '2025-01-31T13:45:00')."
                ) from e

    raise ValueError("Invalid type for deadline; expected date, datetime, or ISO8601 string.")


def _clean_text(v: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= 1000):
        raise ValueError("text length must be between 1 and 1000 characters")
    return s


def _check_color(v: Optional[str]) -> Optional[str]:
    if v is not None and not _HEX_COLOR.match(v):
        raise ValueError("hexColor must look like '#RRGGBB'")
    return v


# PUBLIC_INTERFACE
class TodoItemCreate(BaseModel):
    """
    Schema for adding a new item to a todo list.
    """

    model_config = ConfigDict(
        **_REQUEST_CONFIG,
        json_schema_extra={
            "example": {
                "text": "Buy groceries",
                "importance": "important",
                "deadline": "2025-02-01",
                "isDone": False,
                "hexColor": "#FF9900",
            }
        },
    )

    text: str = Field(..., description="What needs to be done", min_length=1)
    importance: Importance = Field(default=Importance.basic, description="low, basic or important")
    deadline: Optional[datetime] = Field(
        default=None,
        description="Deadline of the item. Accepts ISO8601 date or datetime; dates are set to 00:00",
    )
    is_done: bool = Field(default=False, description="Completion status flag")
    hex_color: Optional[str] = Field(default=None, description="Display color as '#RRGGBB'")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Strip whitespace and enforce 1..1000 length."""
        return _clean_text(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v: Optional[DeadlineInput]) -> Optional[datetime]:
        return _parse_deadline(v)

    @field_validator("hex_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v)

    def to_item(self) -> TodoItem:
        return TodoItem(
            text=self.text,
            importance=self.importance,
            deadline=self.deadline,
            is_done=self.is_done,
            hex_color=self.hex_color,
        )


# PUBLIC_INTERFACE
class TodoItemUpdate(BaseModel):
    """
    Schema for editing an existing item.
    All fields are optional; only provided fields will be updated.
    Sending an explicit null clears deadline or hexColor.
    """

    model_config = ConfigDict(
        **_REQUEST_CONFIG,
        json_schema_extra={"example": {"text": "Buy groceries and supplies", "isDone": True}},
    )

    text: Optional[str] = Field(default=None, description="What needs to be done", min_length=1)
    importance: Optional[Importance] = Field(default=None, description="low, basic or important")
    deadline: Optional[datetime] = Field(default=None, description="Deadline; null clears it")
    is_done: Optional[bool] = Field(default=None, description="Completion status flag")
    hex_color: Optional[str] = Field(default=None, description="Display color; null clears it")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_text(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v: Optional[DeadlineInput]) -> Optional[datetime]:
        return _parse_deadline(v)

    @field_validator("hex_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v)

    def apply(self, item: TodoItem) -> TodoItem:
        """Return `item` with the provided fields changed and changedOn stamped."""
        changes = {}
        for name in ("text", "importance", "is_done"):
            value = getattr(self, name)
            if value is not None:
                changes[name] = value
        for name in ("deadline", "hex_color"):
            if name in self.model_fields_set:
                changes[name] = getattr(self, name)
        changes["changed_on"] = utcnow()
        return item.model_copy(update=changes)


# PUBLIC_INTERFACE
class TodoListCreate(BaseModel):
    """
    Schema for creating a todo list. The id is generated when omitted.
    """

    model_config = ConfigDict(
        **_REQUEST_CONFIG,
        json_schema_extra={"example": {"items": [{"text": "Buy milk"}]}},
    )

    id: Optional[str] = Field(default=None, description="Client-chosen id; a UUID is generated when omitted", min_length=1)
    items: List[TodoItemCreate] = Field(default_factory=list, description="Initial items")


# PUBLIC_INTERFACE
class TodoItemReplace(TodoItemCreate):
    """
    An item inside a list replacement. Items sent with the id of an item the
    list already holds keep that identity and createdOn; items without an id
    are new.
    """

    id: Optional[str] = Field(default=None, description="Id of an existing item; generated when omitted", min_length=1)

    def to_item_replacing(self, existing: Optional[TodoItem]) -> TodoItem:
        item = self.to_item()
        if existing is not None:
            return item.model_copy(update={"id": existing.id, "created_on": existing.created_on, "changed_on": utcnow()})
        if self.id is not None:
            return item.model_copy(update={"id": self.id})
        return item


# PUBLIC_INTERFACE
class TodoListReplace(BaseModel):
    """
    Schema for replacing the items of a todo list.
    Item ids must be unique within the payload.
    """

    model_config = ConfigDict(**_REQUEST_CONFIG)

    items: List[TodoItemReplace] = Field(default_factory=list, description="New items, in display order")

    @field_validator("items")
    @classmethod
    def validate_unique_ids(cls, v: List[TodoItemReplace]) -> List[TodoItemReplace]:
        ids = [item.id for item in v if item.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("item ids must be unique within a list")
        return v


# PUBLIC_INTERFACE
class StoreResult(BaseModel):
    """Outcome of a store lifecycle call."""

    state: str = Field(..., description="Store state after the call")
    count: int = Field(..., description="Number of lists in the working set")
