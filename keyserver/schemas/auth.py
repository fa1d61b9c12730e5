from pydantic import BaseModel, Field
from datetime import datetime


# Request DTOs
class LoginRequest(BaseModel):
    username: str
    password: str


# Response DTOs
class AdminIdentity(BaseModel):
    id: int
    username: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    # expires_at is the Python field, 'expiresAt' is the JSON key
    expires_at: datetime = Field(..., alias="expiresAt")
    user: AdminIdentity

    model_config = {"populate_by_name": True}


class SessionValidationResponse(BaseModel):
    valid: bool = True
    user: AdminIdentity


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"
