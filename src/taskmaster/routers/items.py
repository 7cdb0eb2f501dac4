from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..data_manager import DataManager
from ..dependencies import commit, get_app_settings, get_data_manager
from ..models import TodoItem, TodoList
from ..schemas import TodoItemCreate, TodoItemUpdate
from ..settings import Settings

router = APIRouter(
    prefix="/api/v1/lists/{list_id}/items",
    tags=["items"],
)


def _require_list(manager: DataManager[TodoList], list_id: str) -> TodoList:
    todo_list = manager.get(list_id)
    if todo_list is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo list not found")
    return todo_list


def _require_item(todo_list: TodoList, item_id: str) -> TodoItem:
    item = todo_list.find_item(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo item not found")
    return item


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TodoItem],
    summary="List Todo Items",
    responses={404: {"description": "Todo list not found"}},
)
def list_items(list_id: str, manager: DataManager[TodoList] = Depends(get_data_manager)) -> List[TodoItem]:
    return _require_list(manager, list_id).items


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoItem,
    status_code=status.HTTP_201_CREATED,
    summary="Add Todo Item",
    description="Append an item to a list. The list revision is incremented and the list is marked dirty.",
    responses={
        201: {"description": "Todo item created"},
        404: {"description": "Todo list not found"},
    },
)
def create_item(
    list_id: str,
    payload: TodoItemCreate,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> TodoItem:
    item = payload.to_item()
    with manager.lock:
        todo_list = _require_list(manager, list_id)
        manager.update(todo_list.revise(settings.actor_name, items=[*todo_list.items, item]))
    commit(manager, settings)
    return item


# PUBLIC_INTERFACE
@router.get(
    "/{item_id}",
    response_model=TodoItem,
    summary="Get Todo Item",
    responses={
        200: {"description": "Todo item found"},
        404: {"description": "Todo list or item not found"},
    },
)
def get_item(list_id: str, item_id: str, manager: DataManager[TodoList] = Depends(get_data_manager)) -> TodoItem:
    return _require_item(_require_list(manager, list_id), item_id)


# PUBLIC_INTERFACE
@router.patch(
    "/{item_id}",
    response_model=TodoItem,
    summary="Update Todo Item",
    description="Partially update fields of an item. The owning list is revised.",
    responses={
        200: {"description": "Todo item updated"},
        404: {"description": "Todo list or item not found"},
    },
)
def patch_item(
    list_id: str,
    item_id: str,
    payload: TodoItemUpdate,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> TodoItem:
    with manager.lock:
        todo_list = _require_list(manager, list_id)
        updated = payload.apply(_require_item(todo_list, item_id))
        items = [updated if item.id == item_id else item for item in todo_list.items]
        manager.update(todo_list.revise(settings.actor_name, items=items))
    commit(manager, settings)
    return updated


# PUBLIC_INTERFACE
@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo Item",
    responses={
        204: {"description": "Todo item deleted"},
        404: {"description": "Todo list or item not found"},
    },
)
def delete_item(
    list_id: str,
    item_id: str,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> None:
    with manager.lock:
        todo_list = _require_list(manager, list_id)
        _require_item(todo_list, item_id)
        items = [item for item in todo_list.items if item.id != item_id]
        manager.update(todo_list.revise(settings.actor_name, items=items))
    commit(manager, settings)
    return None
