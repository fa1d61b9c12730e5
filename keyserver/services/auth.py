from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging
import bcrypt

from keyserver.core.config import settings
from keyserver.core.errors import AuthError, ValidationError
from keyserver.db import repository
from keyserver.db.Models.models import AdminUser
from keyserver.schemas.auth import AdminIdentity
from keyserver.utils.encoding import generate_session_token, mask_token


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Salted hash comparison only; a hash that bcrypt cannot parse never matches."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is malformed; rejecting login")
        return False


class AuthService:

    @staticmethod
    def login(
        db: Session,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[str, datetime, AdminIdentity]:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = repository.get_admin_user_by_username(db, username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed admin login for username '{username}' from {ip_address}")
            raise AuthError(INVALID_CREDENTIALS)

        now = datetime.utcnow()
        purged = repository.delete_expired_sessions(db, now)
        if purged:
            logger.info("Purged %d expired admin session(s)", purged)

        token = generate_session_token()
        expires_at = now + timedelta(hours=settings.SESSION_TTL_HOURS)
        repository.create_session(db, token, user.id, expires_at, ip_address, user_agent)
        repository.record_login(db, user, now)

        logger.info(f"Admin '{user.username}' logged in, session {mask_token(token)} until {expires_at}")
        return token, expires_at, AdminIdentity.model_validate(user)

    @staticmethod
    def validate_session(db: Session, token: Optional[str]) -> AdminIdentity:
        if not token:
            raise AuthError("Missing authorization token")

        session = repository.get_session_by_token(db, token)
        if session is None:
            logger.warning(f"Rejected unknown session {mask_token(token)}")
            raise AuthError()

        # Expired rows count as absent even before they are purged
        if session.expires_at <= datetime.utcnow():
            logger.info(f"Rejected expired session {mask_token(token)}")
            raise AuthError()

        user = repository.get_admin_user(db, session.admin_id)
        if user is None:
            raise AuthError()
        return AdminIdentity.model_validate(user)

    @staticmethod
    def logout(db: Session, token: Optional[str]) -> None:
        if not token:
            raise AuthError("Missing authorization token")
        deleted = repository.delete_session(db, token)
        logger.info(f"Logout for session {mask_token(token)} (removed {deleted})")

    @staticmethod
    def upsert_admin_user(db: Session, username: str, password: str) -> AdminUser:
        if not username or not password:
            raise ValidationError("Username and password are required")
        user = repository.upsert_admin_user(db, username, hash_password(password))
        logger.info(f"Admin user '{username}' provisioned")
        return user
