from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from .. import config
from .error_handlers import UnauthorizedError, get_error_message

ALGORITHM = "HS256"


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a token signed by this service.

    Raises UnauthorizedError for malformed, foreign-signed or expired tokens,
    and for tokens without a subject.
    """
    if not token:
        raise UnauthorizedError(get_error_message("missing_token"))
    try:
        claims = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise UnauthorizedError(get_error_message("invalid_token")) from None
    if not claims.get("sub"):
        raise UnauthorizedError(get_error_message("invalid_token"))
    return claims
