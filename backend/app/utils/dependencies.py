from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..services.auth import resolve_principal
from .error_handlers import UnauthorizedError, get_error_message

_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to the *current* user row (401 before any business logic)."""
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise UnauthorizedError(get_error_message("missing_token"))
    return resolve_principal(db, credentials.credentials)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User | None:
    """Like `get_current_user`, but anonymous requests resolve to None. Bad tokens still fail."""
    if credentials is None:
        return None
    return resolve_principal(db, credentials.credentials)
