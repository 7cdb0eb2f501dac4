from __future__ import annotations

import platform
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_actor() -> str:
    """Name recorded in lastUpdatedBy when the caller does not provide one."""
    return platform.node() or "local"


class Importance(str, Enum):
    low = "low"
    basic = "basic"
    important = "important"


_ENTITY_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


# PUBLIC_INTERFACE
class TodoItem(BaseModel):
    """
    A single todo entry owned by a TodoList.

    Fields (JSON keys in camelCase):
    - id: Unique identifier within the owning list (UUID4 string)
    - text: What needs to be done
    - importance: low | basic | important
    - deadline: Optional due timestamp
    - is_done: Completion flag
    - created_on: Creation timestamp
    - changed_on: Last edit timestamp, None until the item is edited
    - hex_color: Optional '#RRGGBB' display color
    """

    model_config = _ENTITY_CONFIG

    id: str = Field(default_factory=_new_id)
    text: str
    importance: Importance = Importance.basic
    deadline: Optional[datetime] = None
    is_done: bool = False
    created_on: datetime = Field(default_factory=utcnow)
    changed_on: Optional[datetime] = None
    hex_color: Optional[str] = None


# PUBLIC_INTERFACE
class TodoList(BaseModel):
    """
    The persisted entity: an ordered collection of TodoItems plus revision
    metadata.

    Fields (JSON keys in camelCase):
    - id: Globally unique identity key (UUID4 string), never changes
    - items: Owned TodoItems in display order
    - revision: Version counter, incremented by the caller on every change
    - is_dirty: Marks local changes not yet synchronized anywhere
    - last_updated_by: Actor that made the last change
    - last_updated_on: Time of the last change (UTC)
    """

    model_config = _ENTITY_CONFIG

    id: str = Field(default_factory=_new_id)
    items: List[TodoItem] = Field(default_factory=list)
    revision: int = Field(default=0, ge=0)
    is_dirty: bool = False
    last_updated_by: str = Field(default_factory=default_actor)
    last_updated_on: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_unique_item_ids(self) -> "TodoList":
        seen = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"duplicate item id {item.id!r} in list {self.id!r}")
            seen.add(item.id)
        return self

    def find_item(self, item_id: str) -> Optional[TodoItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def revise(self, actor: str, **changes) -> "TodoList":
        """
        Return a copy carrying `changes` with the revision bumped, the dirty
        flag set and the last-update stamp moved to `actor` and now.
        """
        changes.update(
            revision=self.revision + 1,
            is_dirty=True,
            last_updated_by=actor,
            last_updated_on=utcnow(),
        )
        # model_validate re-runs check_unique_item_ids
        return type(self).model_validate({**dict(self), **changes})
