from pydantic import BaseModel
from datetime import date as Date, datetime
from typing import Optional


# Key records
class DailyKeyResponse(BaseModel):
    license_key: str
    url_path: str
    date: Date

    model_config = {"from_attributes": True}


class PremiumKeyResponse(BaseModel):
    id: int
    license_key: str
    url_path: str
    is_active: bool
    created_at: Optional[datetime] = None
    expires_at: datetime

    model_config = {"from_attributes": True}


class AdminKeyResponse(BaseModel):
    id: int
    license_key: str
    url_path: str
    is_active: bool
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# Admin actions
class RegeneratedDailyKeyResponse(BaseModel):
    success: bool = True
    key: DailyKeyResponse
    message: str = "Daily key regenerated successfully"


class GeneratedPremiumKeyResponse(BaseModel):
    success: bool = True
    key: PremiumKeyResponse


class GeneratedAdminKeyResponse(BaseModel):
    success: bool = True
    key: AdminKeyResponse


# Public validation
class KeyValidationRequest(BaseModel):
    # Optional so a missing key is reported like a blank one
    license_key: Optional[str] = None


class KeyValidationResponse(BaseModel):
    valid: bool
    expires_at: Optional[str] = None


class KeyPageResponse(BaseModel):
    tier: str
    license_key: str
    url_path: str
    expires_at: Optional[datetime] = None
