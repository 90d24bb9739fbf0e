# backend/app/auth/models.py
from typing import Optional, Union

from pydantic import BaseModel

# Request fields are all optional; the gateway validator owns the rules
# and its field-specific messages.


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    restaurantName: Optional[str] = None
    station: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgetPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[Union[str, int]] = None
    newPassword: Optional[str] = None


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: str
    restaurantName: Optional[str] = None
    station: Optional[str] = None
    isActive: Optional[bool] = None
    isApproved: Optional[bool] = None


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


class RegisterResponse(AuthResponse):
    message: str


class MessageResponse(BaseModel):
    message: str


class VerifyResponse(BaseModel):
    user: UserPublic
