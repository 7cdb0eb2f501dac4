"""
Shared fixtures.

Store tests use real I/O under pytest's tmp_path so every test starts from
an empty directory.
"""

from datetime import datetime, timezone

import pytest

from taskmaster.db import SqliteUnitOfWork
from taskmaster.file_cache import FileCacheUnitOfWork
from taskmaster.models import Importance, TodoItem, TodoList


def make_list(list_id=None, revision=0, texts=("Buy milk",), **overrides):
    fields = {
        "items": [
            TodoItem(
                text=text,
                importance=Importance.important if i == 0 else Importance.basic,
                deadline=datetime(2030, 1, i + 1, 9, 30, tzinfo=timezone.utc) if i == 0 else None,
                hex_color="#FF9900" if i == 0 else None,
            )
            for i, text in enumerate(texts)
        ],
        "revision": revision,
        "last_updated_by": "tests",
    }
    if list_id is not None:
        fields["id"] = list_id
    fields.update(overrides)
    return TodoList(**fields)


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "store"


@pytest.fixture(params=["file", "sqlite"])
def uow_factory(request):
    """Builds fresh units of work for one backend; parametrized over both."""
    if request.param == "file":
        return lambda: FileCacheUnitOfWork(TodoList)
    return SqliteUnitOfWork
