from __future__ import annotations

import time
from typing import Any, Dict

from passlib.context import CryptContext
from jose import jwt, JWTError

from focusquote.config import SECRET_KEY, ALGO, ACCESS_TOKEN_TTL_SECONDS

# --- Password hashing ---
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")

def get_password_hash(password: str) -> str:
    return _pwd.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return _pwd.verify(plain, hashed)
    except ValueError:
        return False

# --- JWT ---
def create_access_token(sub: str, email: str, ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS) -> str:
    payload = {"sub": sub, "email": email, "exp": int(time.time()) + int(ttl_seconds)}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGO)

def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGO])
    except JWTError as e:
        raise ValueError(f"invalid token: {e}")
    if not payload.get("sub"):
        raise ValueError("invalid token payload")
    return payload
