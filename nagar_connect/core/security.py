# nagar_connect/core/security.py
from __future__ import annotations

import time
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from pydantic import BaseModel

from nagar_connect.core.config import Settings, get_settings
from nagar_connect.core.errors import Forbidden, Misconfigured, Unauthorized

ALGO = "HS256"

pwd = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

bearer = HTTPBearer(auto_error=False)


def _clip(password: str | bytes) -> bytes:
    # bcrypt hard limit: 72 BYTES
    if isinstance(password, str):
        password = password.encode("utf-8")
    return password[:72]


def hash_password(password: str) -> str:
    return pwd.hash(_clip(password))


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd.verify(_clip(password), hashed)


class CurrentUser(BaseModel):
    """What a session carries about the caller."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


def _secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        raise Misconfigured(["JWT_SECRET"])
    return settings.jwt_secret


def make_token(user: CurrentUser, settings: Settings) -> str:
    now = int(time.time())
    payload = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "iat": now,
        "exp": now + settings.jwt_ttl_seconds,
    }
    return jwt.encode(payload, _secret(settings), algorithm=ALGO)


def decode_token(token: str, settings: Settings) -> CurrentUser:
    try:
        payload = jwt.decode(token, _secret(settings), algorithms=[ALGO])
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Session expired") from exc
    except jwt.PyJWTError as exc:
        raise Unauthorized("Invalid session") from exc

    if not payload.get("sub"):
        raise Unauthorized("Invalid session")
    return CurrentUser(
        id=payload["sub"],
        email=payload.get("email"),
        name=payload.get("name"),
        role=payload.get("role"),
    )


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    if not creds:
        raise Unauthorized()
    return decode_token(creds.credentials, settings)


def require_role(*roles: str):
    def _dep(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise Forbidden()
        return user

    return _dep
