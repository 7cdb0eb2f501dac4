from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, List, Optional

from pydantic import ValidationError

from .errors import StorageError
from .models import TodoItem, TodoList
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ListCols:
    table: str = "todo_lists"
    id: str = "id"
    position: str = "position"
    revision: str = "revision"
    is_dirty: str = "is_dirty"
    last_updated_by: str = "last_updated_by"
    last_updated_on: str = "last_updated_on"


@dataclass(frozen=True)
class _ItemCols:
    table: str = "todo_items"
    list_id: str = "list_id"
    id: str = "id"
    position: str = "position"
    text: str = "text"
    importance: str = "importance"
    deadline: str = "deadline"
    is_done: str = "is_done"
    created_on: str = "created_on"
    changed_on: str = "changed_on"
    hex_color: str = "hex_color"


_L = _ListCols()
_I = _ItemCols()


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class SqliteUnitOfWork(UnitOfWork[TodoList]):
    """
    Unit of work persisting TodoLists to a local SQLite database.

    Lists and their items live in two tables keyed by id; a position column
    keeps the context order. save() reconciles the tables with the context
    in a single transaction.
    """

    backend_name = "sqlite"

    @contextmanager
    def _conn(self, path: Optional[Path] = None) -> Generator[sqlite3.Connection, None, None]:
        target = path or self.location
        assert target is not None
        conn = sqlite3.connect(str(target))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _resolve_location(self, name: str, connection_url: str) -> Path:
        filename = name if Path(name).suffix else f"{name}.db"
        return Path(connection_url) / filename

    def _prepare(self, location: Path) -> None:
        try:
            location.parent.mkdir(parents=True, exist_ok=True)
            with self._conn(location) as conn:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {_L.table} (
                        {_L.id} TEXT PRIMARY KEY,
                        {_L.position} INTEGER NOT NULL,
                        {_L.revision} INTEGER NOT NULL DEFAULT 0,
                        {_L.is_dirty} INTEGER NOT NULL DEFAULT 0,
                        {_L.last_updated_by} TEXT NOT NULL,
                        {_L.last_updated_on} TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {_I.table} (
                        {_I.list_id} TEXT NOT NULL,
                        {_I.id} TEXT NOT NULL,
                        {_I.position} INTEGER NOT NULL,
                        {_I.text} TEXT NOT NULL,
                        {_I.importance} TEXT NOT NULL,
                        {_I.deadline} TEXT NULL,
                        {_I.is_done} INTEGER NOT NULL DEFAULT 0,
                        {_I.created_on} TEXT NOT NULL,
                        {_I.changed_on} TEXT NULL,
                        {_I.hex_color} TEXT NULL,
                        PRIMARY KEY ({_I.list_id}, {_I.id})
                    )
                    """
                )
                conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{_I.table}_{_I.list_id} ON {_I.table}({_I.list_id})"
                )
        except (OSError, sqlite3.Error) as e:
            logger.error("Cannot create database %s: %s", location, e)
            raise StorageError(f"cannot create database {location}") from e

    def _row_to_item(self, row: sqlite3.Row) -> Dict[str, object]:
        return {
            "id": row[_I.id],
            "text": row[_I.text],
            "importance": row[_I.importance],
            "deadline": row[_I.deadline],
            "is_done": bool(row[_I.is_done]),
            "created_on": row[_I.created_on],
            "changed_on": row[_I.changed_on],
            "hex_color": row[_I.hex_color],
        }

    def _read(self) -> List[TodoList]:
        try:
            with self._conn() as conn:
                list_rows = conn.execute(f"SELECT * FROM {_L.table} ORDER BY {_L.position}").fetchall()
                item_rows = conn.execute(
                    f"SELECT * FROM {_I.table} ORDER BY {_I.list_id}, {_I.position}"
                ).fetchall()
        except sqlite3.Error as e:
            logger.error("Cannot read database %s: %s", self.location, e)
            raise StorageError(f"cannot read database {self.location}") from e

        items_by_list: Dict[str, List[TodoItem]] = {}
        try:
            for row in item_rows:
                items_by_list.setdefault(row[_I.list_id], []).append(
                    TodoItem.model_validate(self._row_to_item(row))
                )
            return [
                TodoList.model_validate(
                    {
                        "id": row[_L.id],
                        "items": items_by_list.get(row[_L.id], []),
                        "revision": int(row[_L.revision]),
                        "is_dirty": bool(row[_L.is_dirty]),
                        "last_updated_by": row[_L.last_updated_by],
                        "last_updated_on": row[_L.last_updated_on],
                    }
                )
                for row in list_rows
            ]
        except ValidationError as e:
            logger.error("Invalid rows in database %s: %s", self.location, e)
            raise StorageError(f"invalid rows in database {self.location}") from e

    def _write(self, entities: List[TodoList]) -> None:
        current_ids = [entity.id for entity in entities]
        list_rows = [
            (
                entity.id,
                position,
                entity.revision,
                1 if entity.is_dirty else 0,
                entity.last_updated_by,
                _dt(entity.last_updated_on),
            )
            for position, entity in enumerate(entities)
        ]
        item_rows = [
            (
                entity.id,
                item.id,
                position,
                item.text,
                item.importance.value,
                _dt(item.deadline),
                1 if item.is_done else 0,
                _dt(item.created_on),
                _dt(item.changed_on),
                item.hex_color,
            )
            for entity in entities
            for position, item in enumerate(entity.items)
        ]

        try:
            with self._conn() as conn:
                stored_ids = {row[_L.id] for row in conn.execute(f"SELECT {_L.id} FROM {_L.table}")}
                stale = [(list_id,) for list_id in stored_ids.difference(current_ids)]
                conn.executemany(f"DELETE FROM {_L.table} WHERE {_L.id} = ?", stale)
                conn.executemany(
                    f"""
                    INSERT INTO {_L.table} ({_L.id}, {_L.position}, {_L.revision}, {_L.is_dirty},
                        {_L.last_updated_by}, {_L.last_updated_on})
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT({_L.id}) DO UPDATE SET
                        {_L.position} = excluded.{_L.position},
                        {_L.revision} = excluded.{_L.revision},
                        {_L.is_dirty} = excluded.{_L.is_dirty},
                        {_L.last_updated_by} = excluded.{_L.last_updated_by},
                        {_L.last_updated_on} = excluded.{_L.last_updated_on}
                    """,
                    list_rows,
                )
                # Items are owned by their list: rewrite each list's set.
                conn.executemany(
                    f"DELETE FROM {_I.table} WHERE {_I.list_id} = ?",
                    stale + [(list_id,) for list_id in current_ids],
                )
                conn.executemany(
                    f"""
                    INSERT INTO {_I.table} ({_I.list_id}, {_I.id}, {_I.position}, {_I.text}, {_I.importance},
                        {_I.deadline}, {_I.is_done}, {_I.created_on}, {_I.changed_on}, {_I.hex_color})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    item_rows,
                )
        except sqlite3.Error as e:
            logger.error("Cannot write database %s: %s", self.location, e)
            raise StorageError(f"cannot write database {self.location}") from e
        logger.debug(
            "sqlite reconcile: %d lists upserted, %d removed, %d items written",
            len(list_rows),
            len(stale),
            len(item_rows),
        )
