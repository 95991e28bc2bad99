from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from focusquote import gateway
from focusquote.auth_utils import decode_access_token
from focusquote.schemas import User, UserRole
from focusquote.session import AppState, SyncController, sessions

_bearer = HTTPBearer()

async def get_current_user(creds: HTTPAuthorizationCredentials = Depends(_bearer)) -> User:
    try:
        payload = decode_access_token(creds.credentials)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = await gateway.fetch_user(payload["sub"])
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    # o papel só vale do lado do servidor
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin only")
    return user

def get_controller(user: User = Depends(get_current_user)) -> SyncController:
    return sessions.get(user)

def get_state(user: User = Depends(get_current_user)) -> AppState:
    return sessions.state_for(user)
