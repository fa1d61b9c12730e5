from keyserver.db.Connection import database
from keyserver.services.auth import AuthService
from keyserver.services.keys import KeyService
from keyserver.services.stats import Stats
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging

from keyserver.api.deps import get_bearer_token, get_current_admin
from keyserver.schemas.auth import (
    AdminIdentity,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionValidationResponse,
)
from keyserver.schemas.keys import (
    AdminKeyResponse,
    DailyKeyResponse,
    GeneratedAdminKeyResponse,
    GeneratedPremiumKeyResponse,
    PremiumKeyResponse,
    RegeneratedDailyKeyResponse,
)
from keyserver.schemas.stats import AdminStatsResponse
from keyserver.services.access_log import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)
router = APIRouter(tags=["admin"])

# --- Session endpoints ---

@router.post("/admin-login", response_model=LoginResponse)
def admin_login_endpoint(credentials: LoginRequest, request: Request, db: Session = Depends(database.get_db)):
    token, expires_at, user = AuthService.login(
        db,
        credentials.username,
        credentials.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return LoginResponse(token=token, expires_at=expires_at, user=user)

@router.get("/admin-validate", response_model=SessionValidationResponse)
def admin_validate_endpoint(admin: AdminIdentity = Depends(get_current_admin)):
    return SessionValidationResponse(valid=True, user=admin)

@router.post("/admin-logout", response_model=LogoutResponse)
def admin_logout_endpoint(token: str = Depends(get_bearer_token), db: Session = Depends(database.get_db)):
    AuthService.logout(db, token)
    return LogoutResponse()

# --- Console endpoints ---

@router.get("/admin-stats", response_model=AdminStatsResponse)
def admin_stats_endpoint(
    admin: AdminIdentity = Depends(get_current_admin),
    db: Session = Depends(database.get_db),
):
    logger.info(f"Admin '{admin.username}' accessed stats.")
    return Stats.collect(db)

@router.post("/regenerate-daily-key", response_model=RegeneratedDailyKeyResponse)
def regenerate_daily_key_endpoint(
    admin: AdminIdentity = Depends(get_current_admin),
    db: Session = Depends(database.get_db),
):
    daily_key = KeyService.regenerate_daily_key(db, admin)
    return RegeneratedDailyKeyResponse(key=DailyKeyResponse.model_validate(daily_key))

@router.post("/generate-premium-key", response_model=GeneratedPremiumKeyResponse)
def generate_premium_key_endpoint(
    admin: AdminIdentity = Depends(get_current_admin),
    db: Session = Depends(database.get_db),
):
    premium_key = KeyService.generate_premium_key(db, admin)
    return GeneratedPremiumKeyResponse(key=PremiumKeyResponse.model_validate(premium_key))

@router.post("/generate-admin-key", response_model=GeneratedAdminKeyResponse)
def generate_admin_key_endpoint(
    admin: AdminIdentity = Depends(get_current_admin),
    db: Session = Depends(database.get_db),
):
    admin_key = KeyService.generate_admin_key(db, admin)
    return GeneratedAdminKeyResponse(key=AdminKeyResponse.model_validate(admin_key))
