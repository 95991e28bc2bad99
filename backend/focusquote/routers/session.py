from fastapi import APIRouter, Depends

from focusquote import schemas
from focusquote.deps import get_current_user, get_controller
from focusquote.session import StateSnapshot, SyncController

router = APIRouter(prefix="/session", tags=["session"])

@router.post("/sync", response_model=StateSnapshot)
async def sync(
    user: schemas.User = Depends(get_current_user),
    ctrl: SyncController = Depends(get_controller),
):
    result = await ctrl.sync(user.id, user.email)
    snapshot = ctrl.state.snapshot()
    if result is None:
        # já havia um sync em andamento: devolve o estado atual sem recarregar
        snapshot.skipped = True
    return snapshot

@router.get("/state", response_model=StateSnapshot)
async def state(ctrl: SyncController = Depends(get_controller)):
    return ctrl.state.snapshot()
