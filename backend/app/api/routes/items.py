"""Items: CRUD over the todo collection.

Invariants:
    - Item ids are assigned by the store; clients never choose them
    - PUT merges only the fields present in the body
    - PUT/DELETE on an unknown id return 404 and leave the collection untouched
    - Store failures surface as 503 through the translation layer
"""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_store
from app.api.translate import unwrap
from app.infrastructure.store import TodoStore
from app.schemas.item import ItemCreate, ItemResponse, ItemUpdate

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=list[ItemResponse])
async def list_items(store: TodoStore = Depends(get_store)):
    return unwrap(await store.list_items())


@router.post(
    "", response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_item(body: ItemCreate, store: TodoStore = Depends(get_store)):
    return unwrap(await store.add_item(body.description, body.completed))


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str, body: ItemUpdate, store: TodoStore = Depends(get_store),
):
    changes = body.changes()
    if not changes:
        return unwrap(await store.get_item(item_id))
    return unwrap(await store.update_item(item_id, changes))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, store: TodoStore = Depends(get_store)):
    unwrap(await store.delete_item(item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
