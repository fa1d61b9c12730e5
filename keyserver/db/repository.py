from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import func
from datetime import date, datetime
import logging
from keyserver.core.errors import StoreError
from keyserver.utils.encoding import (
    ADMIN_PATH_PREFIX,
    DAILY_PATH_PREFIX,
    PREMIUM_PATH_PREFIX,
    build_url_path,
    generate_license_key,
)

from keyserver.db.Models.models import (
    AccessLog,
    AdminKey,
    AdminSession,
    AdminUser,
    DailyKey,
    PremiumKey,
)

logger = logging.getLogger(__name__)

MAX_KEY_RETRIES = 5


def _commit_and_refresh(db: Session, row):
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except IntegrityError as e:
        db.rollback()
        logger.warning("IntegrityError creating %s: %s", type(row).__name__, str(e.orig))
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Store failure creating %s: %s", type(row).__name__, str(e))
        raise StoreError() from e


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Store failure on commit: %s", str(e))
        raise StoreError() from e

# --- Daily keys ---

def get_daily_key_by_date(db: Session, day: date) -> Optional[DailyKey]:
    return db.query(DailyKey).filter(DailyKey.date == day).first()

def get_daily_key_by_license(db: Session, license_key: str, day: date) -> Optional[DailyKey]:
    return db.query(DailyKey).filter(
        DailyKey.license_key == license_key, DailyKey.date == day
    ).first()

def get_daily_key_by_path(db: Session, url_path: str) -> Optional[DailyKey]:
    return db.query(DailyKey).filter(DailyKey.url_path == url_path).first()

def create_daily_key(db: Session, day: date, key_length: int) -> DailyKey:
    """Insert the key for ``day``, or return the row a concurrent writer inserted first."""
    for attempt in range(MAX_KEY_RETRIES):
        license_key = generate_license_key(key_length)
        row = DailyKey(
            license_key=license_key,
            url_path=build_url_path(DAILY_PATH_PREFIX, license_key),
            date=day,
        )
        try:
            return _commit_and_refresh(db, row)
        except IntegrityError:
            existing = get_daily_key_by_date(db, day)
            if existing:
                logger.info("Daily key for %s created concurrently, using existing row", day)
                return existing
            logger.info(f"License key collision on attempt {attempt + 1}/{MAX_KEY_RETRIES}")

    raise StoreError(f"Failed to generate unique daily key after {MAX_KEY_RETRIES} attempts")

def delete_daily_key(db: Session, day: date) -> int:
    deleted = db.query(DailyKey).filter(DailyKey.date == day).delete()
    _commit(db)
    return deleted

def list_daily_keys(db: Session) -> List[DailyKey]:
    return db.query(DailyKey).order_by(DailyKey.date.desc()).all()

# --- Premium / admin keys ---

def _create_tier_key(db: Session, model, prefix: str, key_length: int, **fields):
    for attempt in range(MAX_KEY_RETRIES):
        license_key = generate_license_key(key_length)
        row = model(
            license_key=license_key,
            url_path=build_url_path(prefix, license_key),
            **fields,
        )
        try:
            return _commit_and_refresh(db, row)
        except IntegrityError:
            logger.info(f"License key collision on attempt {attempt + 1}/{MAX_KEY_RETRIES}")

    raise StoreError(f"Failed to generate unique {model.__tablename__} key after {MAX_KEY_RETRIES} attempts")

def create_premium_key(db: Session, expires_at: datetime, admin_id: Optional[int], key_length: int) -> PremiumKey:
    return _create_tier_key(
        db, PremiumKey, PREMIUM_PATH_PREFIX, key_length,
        is_active=True, expires_at=expires_at, created_by_admin=admin_id,
    )

def create_admin_key(db: Session, admin_id: Optional[int], key_length: int) -> AdminKey:
    return _create_tier_key(
        db, AdminKey, ADMIN_PATH_PREFIX, key_length,
        is_active=True, expires_at=None, created_by_admin=admin_id,
    )

def get_premium_key_by_path(db: Session, url_path: str) -> Optional[PremiumKey]:
    return db.query(PremiumKey).filter(PremiumKey.url_path == url_path).first()

def get_admin_key_by_path(db: Session, url_path: str) -> Optional[AdminKey]:
    return db.query(AdminKey).filter(AdminKey.url_path == url_path).first()

def list_premium_keys(db: Session) -> List[PremiumKey]:
    return db.query(PremiumKey).order_by(PremiumKey.created_at.desc(), PremiumKey.id.desc()).all()

def list_admin_keys(db: Session) -> List[AdminKey]:
    return db.query(AdminKey).order_by(AdminKey.created_at.desc(), AdminKey.id.desc()).all()

# --- Admin users & sessions ---

def get_admin_user_by_username(db: Session, username: str) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.username == username).first()

def get_admin_user(db: Session, admin_id: int) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.id == admin_id).first()

def upsert_admin_user(db: Session, username: str, password_hash: str) -> AdminUser:
    user = get_admin_user_by_username(db, username)
    if user is None:
        user = AdminUser(username=username, password_hash=password_hash)
    else:
        user.password_hash = password_hash
    return _commit_and_refresh(db, user)

def record_login(db: Session, user: AdminUser, when: datetime) -> None:
    user.last_login = when
    _commit(db)

def create_session(
    db: Session,
    token: str,
    admin_id: int,
    expires_at: datetime,
    ip_address: Optional[str],
    user_agent: Optional[str],
) -> AdminSession:
    row = AdminSession(
        token=token,
        admin_id=admin_id,
        expires_at=expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    return _commit_and_refresh(db, row)

def get_session_by_token(db: Session, token: str) -> Optional[AdminSession]:
    return db.query(AdminSession).filter(AdminSession.token == token).first()

def delete_session(db: Session, token: str) -> int:
    deleted = db.query(AdminSession).filter(AdminSession.token == token).delete()
    _commit(db)
    return deleted

def delete_expired_sessions(db: Session, now: datetime) -> int:
    deleted = db.query(AdminSession).filter(AdminSession.expires_at <= now).delete()
    _commit(db)
    return deleted

# --- Access logs ---

def add_access_log(db: Session, ip_address: str, user_agent: str) -> AccessLog:
    row = AccessLog(ip_address=ip_address, user_agent=user_agent, accessed_at=datetime.utcnow())
    return _commit_and_refresh(db, row)

def count_access_logs(db: Session, since: Optional[datetime] = None) -> int:
    query = db.query(func.count(AccessLog.id))
    if since is not None:
        query = query.filter(AccessLog.accessed_at >= since)
    return query.scalar() or 0

def recent_access_logs(db: Session, limit: int) -> List[AccessLog]:
    return (
        db.query(AccessLog)
        .order_by(AccessLog.accessed_at.desc(), AccessLog.id.desc())
        .limit(limit)
        .all()
    )
