from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# -------------------------
# Requests (INPUT)
# -------------------------

class RegisterRequest(BaseModel):
    # validated field by field in the service so messages match the web form
    fname: Optional[str] = None
    lname: Optional[str] = None
    email: Optional[str] = None
    phn: Optional[str] = None
    password: Optional[str] = None
    confirmPassword: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


# -------------------------
# Responses (OUTPUT)
# -------------------------

class UserOut(BaseModel):
    id: str
    fullName: str
    email: str
    userType: str
    phoneNumber: Optional[str] = None
    profilePicture: Optional[str] = None
    createdAt: Optional[datetime] = None


class SessionUserOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "User registered successfully"
    user: UserOut


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: UserOut
    token: str


class MeResponse(BaseModel):
    message: str = "User data retrieved successfully"
    user: SessionUserOut
