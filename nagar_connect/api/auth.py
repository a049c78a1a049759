# nagar_connect/api/auth.py
from fastapi import APIRouter, Depends

from nagar_connect.api.deps import get_user_service
from nagar_connect.core.config import Settings, get_settings
from nagar_connect.core.security import CurrentUser, get_current_user, make_token
from nagar_connect.mapper.users_mapper import to_user_out
from nagar_connect.schemas.user import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
)
from nagar_connect.services.users_service import UserService, session_user

router = APIRouter(prefix="/auth", tags=["Auth"])


# =========================
# 1) Register
# =========================
@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, service: UserService = Depends(get_user_service)):
    doc = await service.register(body)
    return {"user": to_user_out(doc)}


# =========================
# 2) Login
# =========================
@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    doc = await service.authenticate(body.email, body.password)
    token = make_token(session_user(doc), settings)
    return {"user": to_user_out(doc), "token": token}


# =========================
# 3) Current session
# =========================
@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUser = Depends(get_current_user)):
    return {"user": user.model_dump()}
