from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session
import logging

from keyserver.db.Connection import database
from keyserver.schemas.keys import (
    DailyKeyResponse,
    KeyPageResponse,
    KeyValidationRequest,
    KeyValidationResponse,
)
from keyserver.services.keys import KeyService
from keyserver.services import access_log

logger = logging.getLogger(__name__)

router = APIRouter(tags=["keys"])

@router.get("/daily-key", response_model=DailyKeyResponse)
def get_daily_key_endpoint(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(database.get_db),
):
    daily_key = KeyService.get_or_create_daily_key(db)
    access_log.schedule_access_log(request, background_tasks)
    return DailyKeyResponse.model_validate(daily_key)

@router.post("/validate-key", response_model=KeyValidationResponse)
def validate_key_endpoint(
    body: KeyValidationRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(database.get_db),
):
    result = KeyService.validate_key(db, body.license_key)
    access_log.schedule_access_log(request, background_tasks)
    logger.info(f"Key validation from {access_log.get_client_ip(request)}: valid={result.valid}")
    return result

@router.get("/key-page/{url_path:path}", response_model=KeyPageResponse)
def get_key_page_endpoint(url_path: str, db: Session = Depends(database.get_db)):
    """Look up the live key behind a key page slug such as ``key/ab12...``."""
    return KeyService.get_key_by_path(db, url_path)
