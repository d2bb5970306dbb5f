"""
Identity & session: registration, login and token-to-principal resolution.

Tokens only prove identity. Authorization always uses the role and
organization stored on the user row at request time (see `resolve_principal`).
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.enums import Role
from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    UnauthorizedError,
    get_error_message,
    handle_database_error,
)
from ..utils.jwt import create_access_token, decode_access_token
from ..utils.security import hash_password, verify_password
from ..utils.validation import validate_email, validate_enum, validate_password, validate_string_field
from .projections import user_to_public

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role})


def register(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
    role: str | None = None,
) -> dict:
    email = validate_email(email)
    validate_password(password)
    role_value = validate_enum(role, Role, "Role") if role else Role.CANDIDATE.value
    if role_value == Role.ADMIN.value:
        raise ForbiddenError("Admin accounts cannot be self-registered.")

    if db.query(User).filter(User.email == email).first():
        raise ConflictError(get_error_message("email_exists"))

    user = User(
        email=email,
        password=hash_password(password),
        first_name=validate_string_field(first_name, "First name", max_length=120, required=False),
        last_name=validate_string_field(last_name, "Last name", max_length=120, required=False),
        role=role_value,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Concurrent signup with the same email won the race.
        db.rollback()
        raise ConflictError(get_error_message("email_exists")) from None
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating user") from e

    logger.info("Registered user %s with role %s", user.id, user.role)
    return {"user": user_to_public(user), "access_token": issue_token(user), "token_type": "bearer"}


def login(db: Session, *, email: str, password: str) -> dict:
    # Unknown email and wrong password must be indistinguishable to the caller.
    invalid = UnauthorizedError(get_error_message("invalid_credentials"))
    if not email or not password:
        raise invalid

    user = db.query(User).filter(User.email == email.strip()).first()
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise invalid

    return {
        "user": user_to_public(user, include_organization=True),
        "access_token": issue_token(user),
        "token_type": "bearer",
    }


def verify(token: str) -> tuple[int, str | None]:
    """Return the (user id, role) claim embedded in a valid token."""
    claims = decode_access_token(token)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError(get_error_message("invalid_token")) from None
    return user_id, claims.get("role")


def resolve_principal(db: Session, token: str) -> User:
    """Verify `token` and load the current user row it refers to."""
    user_id, _ = verify(token)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnauthorizedError(get_error_message("user_not_found"))
    return user
