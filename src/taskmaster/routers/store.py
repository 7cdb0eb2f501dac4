from __future__ import annotations

from fastapi import APIRouter, Depends

from ..data_manager import DataManager
from ..dependencies import get_data_manager
from ..models import TodoList
from ..schemas import StoreResult

router = APIRouter(
    prefix="/api/v1/store",
    tags=["store"],
)


# PUBLIC_INTERFACE
@router.post(
    "/load",
    response_model=StoreResult,
    summary="Reload Store",
    description="Discard the in-memory working set and reload it from storage.",
)
def load_store(manager: DataManager[TodoList] = Depends(get_data_manager)) -> StoreResult:
    with manager.lock:
        lists = manager.load()
        return StoreResult(state=manager.state.value, count=len(lists))


# PUBLIC_INTERFACE
@router.post(
    "/save",
    response_model=StoreResult,
    summary="Save Store",
    description="Persist the whole in-memory working set to storage.",
)
def save_store(manager: DataManager[TodoList] = Depends(get_data_manager)) -> StoreResult:
    with manager.lock:
        manager.save()
        return StoreResult(state=manager.state.value, count=len(manager.get_all()))
