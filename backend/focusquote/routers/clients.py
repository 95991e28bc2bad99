from fastapi import APIRouter, Depends, HTTPException, Query
from focusquote import gateway, schemas
from focusquote.deps import get_current_user, get_state
from focusquote.session import AppState

router = APIRouter(prefix="/clients", tags=["clients"])

@router.post("/", response_model=schemas.Client)
async def create_client(
    payload: schemas.ClientCreate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    client = await gateway.insert_client(user.id, payload)
    state.item_saved("clients", client)
    return client

@router.get("/", response_model=list[schemas.Client])
async def list_clients(
    q: str | None = Query(default=None, description="Filter by name contains"),
    user: schemas.User = Depends(get_current_user),
):
    return await gateway.list_clients(user.id, q=q)

@router.get("/{client_id}", response_model=schemas.Client)
async def get_client(client_id: str, user: schemas.User = Depends(get_current_user)):
    client = await gateway.get_client(user.id, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.patch("/{client_id}", response_model=schemas.Client)
async def update_client(
    client_id: str,
    payload: schemas.ClientUpdate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    existing = await gateway.get_client(user.id, client_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Client not found")
    data = existing.model_dump()
    data.update(payload.model_dump(exclude_unset=True, exclude_none=True))
    client = await gateway.update_client(user.id, schemas.Client(**data))
    state.item_saved("clients", client)
    return client

@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: str,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    existing = await gateway.get_client(user.id, client_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Client not found")
    # exclusão imediata, sem proteção de orçamentos vinculados
    await gateway.delete_client(user.id, client_id)
    state.item_deleted("clients", client_id)
    return None
