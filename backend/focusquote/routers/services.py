from fastapi import APIRouter, Depends, HTTPException, Query
from focusquote import gateway, schemas
from focusquote.deps import get_current_user, get_state
from focusquote.session import AppState

router = APIRouter(prefix="/services", tags=["services"])

@router.post("/", response_model=schemas.ServiceTemplate)
async def create_service(
    payload: schemas.ServiceCreate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    service = await gateway.insert_service(user.id, payload)
    state.item_saved("services", service)
    return service

@router.get("/", response_model=list[schemas.ServiceTemplate])
async def list_services(
    q: str | None = Query(default=None, description="Filter by name contains"),
    user: schemas.User = Depends(get_current_user),
):
    return await gateway.list_services(user.id, q=q)

@router.get("/{service_id}", response_model=schemas.ServiceTemplate)
async def get_service(service_id: str, user: schemas.User = Depends(get_current_user)):
    service = await gateway.get_service(user.id, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service

@router.patch("/{service_id}", response_model=schemas.ServiceTemplate)
async def update_service(
    service_id: str,
    payload: schemas.ServiceUpdate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    existing = await gateway.get_service(user.id, service_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Service not found")
    data = existing.model_dump()
    data.update(payload.model_dump(exclude_unset=True, exclude_none=True))
    service = await gateway.update_service(user.id, schemas.ServiceTemplate(**data))
    state.item_saved("services", service)
    return service

@router.delete("/{service_id}", status_code=204)
async def delete_service(
    service_id: str,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    existing = await gateway.get_service(user.id, service_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Service not found")
    await gateway.delete_service(user.id, service_id)
    state.item_deleted("services", service_id)
    return None
