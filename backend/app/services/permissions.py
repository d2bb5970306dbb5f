"""Authorization predicates shared by the resource services."""
import logging

from ..models.enums import Role
from ..models.user import User
from ..utils.error_handlers import ForbiddenError, get_error_message

logger = logging.getLogger(__name__)


def has_role(user: User, *roles: Role) -> bool:
    return user is not None and user.role in {r.value for r in roles}


def ensure_role(user: User, *roles: Role, message: str | None = None) -> None:
    if not has_role(user, *roles):
        logger.warning(
            "User %s with role %s denied; requires %s",
            getattr(user, "id", None),
            getattr(user, "role", None),
            "/".join(r.value for r in roles),
        )
        raise ForbiddenError(message or get_error_message("forbidden"))


def is_member(user: User, organization_id: int) -> bool:
    return user is not None and user.organization_id is not None and user.organization_id == organization_id


def ensure_member_or_admin(user: User, organization_id: int, message: str | None = None) -> None:
    """Platform admins may act on any organization; everyone else only on their own."""
    if has_role(user, Role.ADMIN) or is_member(user, organization_id):
        return
    logger.warning("User %s is not a member of organization %s", getattr(user, "id", None), organization_id)
    raise ForbiddenError(message or "You are not a member of this organization.")
