from keyserver.schemas.keys import AdminKeyResponse, DailyKeyResponse, PremiumKeyResponse
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class AccessLogResponse(BaseModel):
    id: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    accessed_at: datetime

    model_config = {"from_attributes": True}


class AdminStatsResponse(BaseModel):
    today_access: int = Field(..., alias="todayAccess")
    total_access: int = Field(..., alias="totalAccess")
    recent_accesses: List[AccessLogResponse] = Field(..., alias="recentAccesses")
    daily_keys: List[DailyKeyResponse] = Field(..., alias="dailyKeys")
    premium_keys: List[PremiumKeyResponse] = Field(..., alias="premiumKeys")
    admin_keys: List[AdminKeyResponse] = Field(..., alias="adminKeys")

    model_config = {"populate_by_name": True}
