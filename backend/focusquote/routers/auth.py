import logging

from fastapi import APIRouter, HTTPException, Depends
from focusquote import gateway, schemas
from focusquote.auth_utils import get_password_hash, verify_password, create_access_token
from focusquote.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=schemas.Token)
async def register(payload: schemas.UserCreate):
    existing = await gateway.fetch_user_credentials(payload.email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    user = await gateway.create_user(payload.email, get_password_hash(payload.password))
    logger.info("registered user %s", user.id)
    return {"access_token": create_access_token(sub=user.id, email=user.email)}

@router.post("/login", response_model=schemas.Token)
async def login(payload: schemas.UserLogin):
    row = await gateway.fetch_user_credentials(payload.email)
    if not row or not verify_password(payload.password, row["hashed_password"]):
        raise HTTPException(status_code=400, detail="Invalid credentials")
    return {"access_token": create_access_token(sub=row["id"], email=row["email"])}

@router.get("/me", response_model=schemas.MeOut)
async def me(user: schemas.User = Depends(get_current_user)):
    return user
