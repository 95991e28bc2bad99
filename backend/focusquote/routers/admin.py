import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from focusquote import gateway, schemas
from focusquote.deps import require_admin
from focusquote.session import sessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/profiles", response_model=list[schemas.AdminProfileOut])
async def list_profiles(
    q: str | None = Query(default=None, description="Name, email or studio contains"),
    admin: schemas.User = Depends(require_admin),
):
    profiles = await gateway.list_profiles_with_roles()
    if q:
        term = q.lower()
        profiles = [
            p for p in profiles
            if term in p.name.lower() or term in p.email.lower() or term in (p.studio_name or "").lower()
        ]
    return profiles

@router.post("/profiles/{profile_id}/toggle-role", response_model=schemas.User)
async def toggle_role(profile_id: str, admin: schemas.User = Depends(require_admin)):
    owner_id = await gateway.fetch_profile_owner(profile_id)
    owner = await gateway.fetch_user(owner_id) if owner_id else None
    if owner is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    new_role = schemas.UserRole.PHOTOGRAPHER if owner.role == schemas.UserRole.ADMIN else schemas.UserRole.ADMIN
    await gateway.set_user_role(owner.id, new_role)
    logger.info("admin %s set role of %s to %s", admin.id, owner.id, new_role.value)
    return owner.model_copy(update={"role": new_role})

@router.delete("/profiles/{profile_id}", status_code=204)
async def delete_profile(profile_id: str, admin: schemas.User = Depends(require_admin)):
    # o usuário continua existindo; só o perfil é apagado
    owner_id = await gateway.fetch_profile_owner(profile_id)
    if owner_id is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    await gateway.delete_profile(profile_id)
    sessions.drop(owner_id)
    logger.info("admin %s deleted profile %s", admin.id, profile_id)
    return None
