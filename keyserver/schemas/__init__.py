# re-export common schemas for simpler imports
from .keys import (
    AdminKeyResponse,
    DailyKeyResponse,
    GeneratedAdminKeyResponse,
    GeneratedPremiumKeyResponse,
    KeyPageResponse,
    KeyValidationRequest,
    KeyValidationResponse,
    PremiumKeyResponse,
    RegeneratedDailyKeyResponse,
)
from .auth import (
    AdminIdentity,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionValidationResponse,
)
from .stats import AccessLogResponse, AdminStatsResponse

__all__ = [
    "AdminKeyResponse",
    "DailyKeyResponse",
    "GeneratedAdminKeyResponse",
    "GeneratedPremiumKeyResponse",
    "KeyPageResponse",
    "KeyValidationRequest",
    "KeyValidationResponse",
    "PremiumKeyResponse",
    "RegeneratedDailyKeyResponse",
    "AdminIdentity",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "SessionValidationResponse",
    "AccessLogResponse",
    "AdminStatsResponse",
]
