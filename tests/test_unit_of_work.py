"""
Unit-of-work contract tests.

Every test runs against both backends through the `uow_factory` fixture,
so the JSON cache and SQLite store stay interchangeable.
"""

import sqlite3

import pydantic
import pytest

from taskmaster.errors import NotConfiguredError
from taskmaster.models import TodoItem
from taskmaster.unit_of_work import StoreState

from conftest import make_list


@pytest.fixture
def uow(uow_factory, store_dir):
    unit = uow_factory()
    unit.configure("TodoList", str(store_dir))
    return unit


def _reloaded(uow_factory, store_dir):
    fresh = uow_factory()
    fresh.configure("TodoList", str(store_dir))
    fresh.load()
    return fresh


class TestLifecycle:
    def test_starts_unconfigured(self, uow_factory):
        assert uow_factory().state is StoreState.unconfigured

    def test_load_before_configure_fails_fast(self, uow_factory):
        with pytest.raises(NotConfiguredError):
            uow_factory().load()

    def test_crud_before_load_fails_fast(self, uow):
        assert uow.state is StoreState.configured
        with pytest.raises(NotConfiguredError):
            uow.get_all()
        with pytest.raises(NotConfiguredError):
            uow.insert(make_list("1"))
        with pytest.raises(NotConfiguredError):
            uow.save()

    def test_state_transitions(self, uow):
        uow.load()
        assert uow.state is StoreState.loaded

        uow.insert(make_list("1"))
        assert uow.state is StoreState.mutated

        uow.save()
        assert uow.state is StoreState.saved

        # a no-op does not count as a mutation
        uow.delete("missing")
        assert uow.state is StoreState.saved

    def test_load_of_fresh_store_is_empty(self, uow):
        assert uow.load() == []
        assert uow.get_all() == []


class TestConfigure:
    def test_configure_creates_the_directory(self, uow_factory, tmp_path):
        target = tmp_path / "nested" / "dir"
        location = uow_factory().configure("TodoList", str(target))
        assert target.is_dir()
        assert location.parent == target

    def test_configure_twice_keeps_data_and_state(self, uow, store_dir):
        uow.load()
        uow.insert(make_list("1"))
        uow.save()
        uow.insert(make_list("2"))

        first = uow.location
        assert uow.configure("TodoList", str(store_dir)) == first
        assert uow.state is StoreState.mutated
        assert [e.id for e in uow.get_all()] == ["1", "2"]

    def test_configure_twice_on_fresh_instances_loses_nothing(self, uow_factory, uow, store_dir):
        uow.load()
        for i in range(3):
            uow.insert(make_list(str(i)))
        uow.save()

        again = uow_factory()
        again.configure("TodoList", str(store_dir))
        again.configure("TodoList", str(store_dir))
        assert len(again.load()) == 3

    def test_configure_other_location_clears_context(self, uow, tmp_path):
        uow.load()
        uow.insert(make_list("1"))

        uow.configure("Other", str(tmp_path / "other"))

        assert uow.state is StoreState.configured
        assert len(uow.context) == 0
        assert uow.load() == []


class TestRoundTrip:
    def test_save_five_then_reload(self, uow, uow_factory, store_dir):
        uow.load()
        saved = [make_list(texts=("a", "b")) for _ in range(5)]
        for entity in saved:
            assert uow.insert(entity) is None
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)

        assert len(fresh.get_all()) == 5
        assert [e.id for e in fresh.get_all()] == [e.id for e in saved]

    def test_reload_reconstructs_equal_entities(self, uow, uow_factory, store_dir):
        uow.load()
        original = make_list("1", revision=3, texts=("first", "second", "third"), is_dirty=True)
        uow.insert(original)
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)

        assert fresh.get("1") == original
        assert [item.text for item in fresh.get("1").items] == ["first", "second", "third"]

    def test_repeated_load_is_idempotent(self, uow):
        uow.load()
        uow.insert(make_list("1"))
        uow.insert(make_list("2"))
        uow.save()

        first = uow.load()
        second = uow.load()
        assert first == second

    def test_load_discards_unsaved_changes(self, uow):
        uow.load()
        uow.insert(make_list("1"))
        uow.save()
        uow.insert(make_list("2"))

        assert [e.id for e in uow.load()] == ["1"]

    def test_update_and_delete_are_persisted(self, uow, uow_factory, store_dir):
        uow.load()
        for i in range(4):
            uow.insert(make_list(str(i)))
        uow.save()

        uow.update(make_list("1", revision=1, texts=("changed",)))
        uow.delete("2")
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)
        assert [e.id for e in fresh.get_all()] == ["0", "1", "3"]
        assert fresh.get("1").revision == 1
        assert [item.text for item in fresh.get("1").items] == ["changed"]

    def test_upsert_of_existing_does_not_duplicate(self, uow, uow_factory, store_dir):
        uow.load()
        uow.insert(make_list("1"))
        uow.save()

        assert uow.upsert(make_list("1", revision=1)) is not None
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)
        assert len(fresh.get_all()) == 1
        assert fresh.get("1").revision == 1

    def test_item_ids_are_scoped_to_their_list(self, uow, uow_factory, store_dir):
        uow.load()
        uow.insert(make_list("1", items=[TodoItem(id="shared", text="first list")]))
        uow.insert(make_list("2", items=[TodoItem(id="shared", text="second list")]))
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)
        assert fresh.get("1").find_item("shared").text == "first list"
        assert fresh.get("2").find_item("shared").text == "second list"

    def test_list_with_duplicate_item_ids_never_reaches_the_store(self, uow, uow_factory, store_dir):
        uow.load()
        uow.insert(make_list("1"))
        uow.save()
        item = TodoItem(id="x", text="a")

        with pytest.raises(pydantic.ValidationError):
            uow.update(make_list("1", items=[item, item]))
        uow.save()

        fresh = _reloaded(uow_factory, store_dir)
        assert fresh.get("1") == uow.get("1")


class TestCrudPassThrough:
    def test_insert_conflict_returns_existing(self, uow):
        uow.load()
        stored = make_list("1")
        uow.insert(stored)
        assert uow.insert(make_list("1", revision=9)) == stored

    def test_unknown_ids_return_none(self, uow):
        uow.load()
        uow.insert(make_list("1"))
        assert uow.get("2") is None
        assert uow.update(make_list("2")) is None
        assert uow.delete("2") is None
        assert [e.id for e in uow.get_all()] == ["1"]


def test_sqlite_schema_is_created_once(store_dir):
    from taskmaster.db import SqliteUnitOfWork

    first = SqliteUnitOfWork()
    path = first.configure("TodoList", str(store_dir))
    SqliteUnitOfWork().configure("TodoList", str(store_dir))

    conn = sqlite3.connect(str(path))
    try:
        tables = [row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")]
    finally:
        conn.close()
    assert tables == ["todo_items", "todo_lists"]


def test_sqlite_delete_removes_rows(store_dir):
    from taskmaster.db import SqliteUnitOfWork

    uow = SqliteUnitOfWork()
    path = uow.configure("TodoList", str(store_dir))
    uow.load()
    uow.insert(make_list("1", texts=("a", "b")))
    uow.insert(make_list("2", texts=("c",)))
    uow.save()

    uow.delete("1")
    uow.save()

    conn = sqlite3.connect(str(path))
    try:
        lists = conn.execute("SELECT id FROM todo_lists").fetchall()
        items = conn.execute("SELECT list_id FROM todo_items").fetchall()
    finally:
        conn.close()
    assert lists == [("2",)]
    assert items == [("2",)]
