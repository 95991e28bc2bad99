from fastapi import APIRouter, Depends

from focusquote import gateway, schemas
from focusquote.deps import get_current_user, get_state
from focusquote.session import AppState

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("/", response_model=schemas.Profile)
async def get_profile(user: schemas.User = Depends(get_current_user)):
    profile = await gateway.fetch_profile(user.id)
    return profile or schemas.Profile(email=user.email)

@router.put("/", response_model=schemas.Profile)
async def save_profile(
    payload: schemas.ProfileUpdate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    profile = schemas.Profile(**payload.model_dump())
    await gateway.upsert_profile(user.id, profile)
    state.item_saved("profile", profile)
    return profile
