from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..data_manager import DataManager
from ..dependencies import commit, get_app_settings, get_data_manager
from ..models import TodoList
from ..schemas import TodoListCreate, TodoListReplace
from ..settings import Settings

router = APIRouter(
    prefix="/api/v1/lists",
    tags=["lists"],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TodoList],
    summary="List Todo Lists",
    description="Return every todo list in the working set, in stored order.",
)
def list_lists(manager: DataManager[TodoList] = Depends(get_data_manager)) -> List[TodoList]:
    return manager.get_all()


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoList,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo List",
    description="Create a new todo list. The id is generated unless the client provides one.",
    responses={
        201: {"description": "Todo list created"},
        409: {"description": "A todo list with this id already exists"},
    },
)
def create_list(
    payload: TodoListCreate,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> TodoList:
    """
    Create a todo list. Insert never overwrites: an existing id yields 409.
    """
    fields = {"items": [item.to_item() for item in payload.items], "last_updated_by": settings.actor_name}
    if payload.id is not None:
        fields["id"] = payload.id
    todo_list = TodoList(**fields)

    existing = manager.insert(todo_list)
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Todo list already exists")
    commit(manager, settings)
    return todo_list


# PUBLIC_INTERFACE
@router.get(
    "/{list_id}",
    response_model=TodoList,
    summary="Get Todo List",
    responses={
        200: {"description": "Todo list found"},
        404: {"description": "Todo list not found"},
    },
)
def get_list(list_id: str, manager: DataManager[TodoList] = Depends(get_data_manager)) -> TodoList:
    todo_list = manager.get(list_id)
    if todo_list is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo list not found")
    return todo_list


# PUBLIC_INTERFACE
@router.put(
    "/{list_id}",
    response_model=TodoList,
    summary="Replace Todo List",
    description=(
        "Replace the items of a todo list, creating the list when the id is unknown. "
        "An existing list gets its revision incremented and is marked dirty."
    ),
    responses={
        200: {"description": "Todo list replaced"},
        201: {"description": "Todo list created"},
    },
)
def put_list(
    list_id: str,
    payload: TodoListReplace,
    response: Response,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> TodoList:
    with manager.lock:
        current = manager.get(list_id)
        items = [
            item.to_item_replacing(current.find_item(item.id) if current is not None and item.id else None)
            for item in payload.items
        ]
        if current is None:
            replacement = TodoList(id=list_id, items=items, last_updated_by=settings.actor_name)
        else:
            replacement = current.revise(settings.actor_name, items=items)
        previous = manager.upsert(replacement)
    response.status_code = status.HTTP_200_OK if previous is not None else status.HTTP_201_CREATED
    commit(manager, settings)
    return replacement


# PUBLIC_INTERFACE
@router.delete(
    "/{list_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo List",
    responses={
        204: {"description": "Todo list deleted"},
        404: {"description": "Todo list not found"},
    },
)
def delete_list(
    list_id: str,
    manager: DataManager[TodoList] = Depends(get_data_manager),
    settings: Settings = Depends(get_app_settings),
) -> None:
    removed = manager.delete(list_id)
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo list not found")
    commit(manager, settings)
    return None
