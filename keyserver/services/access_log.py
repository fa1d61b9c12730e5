from keyserver.db.Connection import database
from keyserver.db import repository
from fastapi import BackgroundTasks, Request
from sqlalchemy.exc import SQLAlchemyError
from keyserver.core.errors import StoreError
import logging

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


def get_client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else UNKNOWN


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or UNKNOWN


def record_access(ip_address: str, user_agent: str):
    """Append an access row in its own session; failures are logged, never raised."""
    db = database.SessionLocal()
    try:
        repository.add_access_log(db, ip_address or UNKNOWN, user_agent or UNKNOWN)
    except (StoreError, SQLAlchemyError):
        db.rollback()
        logger.exception("access_log.record_access: failed to record access from %s", ip_address)
    finally:
        db.close()


def schedule_access_log(request: Request, background_tasks: BackgroundTasks):
    background_tasks.add_task(record_access, get_client_ip(request), get_user_agent(request))
