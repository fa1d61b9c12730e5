from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from keyserver.core.errors import AuthError
from keyserver.db.Connection import database
from keyserver.schemas.auth import AdminIdentity
from keyserver.services.auth import AuthService

# auto_error is off so a missing header surfaces as AuthError (401), not 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing authorization token")
    return credentials.credentials


def get_current_admin(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(database.get_db),
) -> AdminIdentity:
    return AuthService.validate_session(db, token)
