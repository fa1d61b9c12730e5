from datetime import datetime, timedelta, date
from sqlalchemy.orm import Session
from typing import Optional
import logging

from keyserver.core.config import settings
from keyserver.core.errors import NotFoundError, ValidationError
from keyserver.db import repository
from keyserver.db.Models.models import AdminKey, DailyKey, PremiumKey
from keyserver.schemas.auth import AdminIdentity
from keyserver.schemas.keys import KeyPageResponse, KeyValidationResponse
from keyserver.utils.encoding import normalize_url_path


logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.utcnow().date()


def end_of_day(day: date) -> str:
    return f"{day.isoformat()}T23:59:59Z"


class KeyService:

    @staticmethod
    def get_or_create_daily_key(db: Session) -> DailyKey:
        today = utc_today()
        existing = repository.get_daily_key_by_date(db, today)
        if existing:
            return existing

        daily_key = repository.create_daily_key(db, today, settings.LICENSE_KEY_LENGTH)
        logger.info("Daily key issued for %s at %s", today, daily_key.url_path)
        return daily_key

    @staticmethod
    def regenerate_daily_key(db: Session, admin: AdminIdentity) -> DailyKey:
        today = utc_today()
        removed = repository.delete_daily_key(db, today)
        daily_key = repository.create_daily_key(db, today, settings.LICENSE_KEY_LENGTH)
        logger.info(
            "Daily key for %s regenerated by '%s' (replaced %d row(s))",
            today, admin.username, removed,
        )
        return daily_key

    @staticmethod
    def generate_premium_key(db: Session, admin: AdminIdentity) -> PremiumKey:
        expires_at = datetime.utcnow() + timedelta(days=settings.PREMIUM_KEY_TTL_DAYS)
        premium_key = repository.create_premium_key(db, expires_at, admin.id, settings.LICENSE_KEY_LENGTH)
        logger.info("Premium key %s generated by '%s', expires %s", premium_key.url_path, admin.username, expires_at)
        return premium_key

    @staticmethod
    def generate_admin_key(db: Session, admin: AdminIdentity) -> AdminKey:
        admin_key = repository.create_admin_key(db, admin.id, settings.LICENSE_KEY_LENGTH)
        logger.info("Admin key %s generated by '%s'", admin_key.url_path, admin.username)
        return admin_key

    @staticmethod
    def validate_key(db: Session, license_key: Optional[str]) -> KeyValidationResponse:
        if not license_key or not license_key.strip():
            raise ValidationError("License key is required")

        today = utc_today()
        match = repository.get_daily_key_by_license(db, license_key, today)
        if match is None:
            return KeyValidationResponse(valid=False, expires_at=None)
        return KeyValidationResponse(valid=True, expires_at=end_of_day(match.date))

    @staticmethod
    def get_key_by_path(db: Session, url_path: str) -> KeyPageResponse:
        """
        Resolve a key page slug to its key.
        Daily keys resolve only on their own day, premium keys only while
        active and unexpired, admin keys only while active.
        """
        path = normalize_url_path(url_path)
        now = datetime.utcnow()

        daily = repository.get_daily_key_by_path(db, path)
        if daily is not None and daily.date == now.date():
            return KeyPageResponse(
                tier="daily",
                license_key=daily.license_key,
                url_path=daily.url_path,
                expires_at=datetime.combine(daily.date, datetime.max.time()).replace(microsecond=0),
            )

        premium = repository.get_premium_key_by_path(db, path)
        if premium is not None and premium.is_active and premium.expires_at > now:
            return KeyPageResponse(
                tier="premium",
                license_key=premium.license_key,
                url_path=premium.url_path,
                expires_at=premium.expires_at,
            )

        admin_key = repository.get_admin_key_by_path(db, path)
        if admin_key is not None and admin_key.is_active:
            return KeyPageResponse(
                tier="admin",
                license_key=admin_key.license_key,
                url_path=admin_key.url_path,
                expires_at=None,
            )

        logger.warning(f"Key page 404: no live key at path: {path}")
        raise NotFoundError()
