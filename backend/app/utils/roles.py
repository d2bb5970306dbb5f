from fastapi import Depends

from ..models.enums import Role
from ..services.permissions import ensure_role
from .dependencies import get_current_user


def _role_required(*required_roles: Role):
    label = " or ".join(r.value.capitalize() for r in required_roles)

    def check_role(user=Depends(get_current_user)):
        ensure_role(user, *required_roles, message=f"{label} access only")
        return user
    return check_role


recruiter_only = _role_required(Role.RECRUITER)
candidate_only = _role_required(Role.CANDIDATE)
recruiter_or_admin = _role_required(Role.RECRUITER, Role.ADMIN)
