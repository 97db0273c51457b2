"""Pydantic request/response schemas for wl_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field

from src.wl_gateway.auth.pin import PIN_LENGTH

_PHONE_PATTERN = r"^\+?[0-9]{10,15}$"
_PIN_PATTERN = rf"^[0-9]{{{PIN_LENGTH}}}$"


class RegisterRequest(BaseModel):
    phone_number: str = Field(..., pattern=_PHONE_PATTERN)
    pin: str = Field(..., pattern=_PIN_PATTERN, description="Six-digit PIN")
    name: str = Field(..., min_length=2, max_length=100)


class LoginRequest(BaseModel):
    phone_number: str
    pin: str


class RefreshRequest(BaseModel):
    refresh_token: str


class CheckPhoneRequest(BaseModel):
    phone_number: str = Field(..., pattern=_PHONE_PATTERN)


class UserInfo(BaseModel):
    """User profile embedded in responses."""

    user_id: str
    phone_number: str
    name: str
    balance: int
    is_admin: bool = False


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800


class CheckPhoneResponse(BaseModel):
    exists: bool
