"""
Organization lifecycle and membership management.

Creating an organization and linking its creator happen in a single
transaction: either both are committed or neither is.
"""
import json
import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.enums import Plan, Role
from ..models.job import Job
from ..models.organization import Organization
from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import (
    validate_email,
    validate_enum,
    validate_slug,
    validate_string_field,
)
from .permissions import ensure_member_or_admin, ensure_role, is_member
from .projections import organization_to_public, user_to_public

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "slug", "plan", "settings")


def _get_organization(db: Session, org_id: int) -> Organization:
    org = db.query(Organization).filter(Organization.id == org_id).first()
    if not org:
        raise NotFoundError(get_error_message("organization_not_found"))
    return org


def _slug_taken(db: Session, slug: str, *, exclude_id: int | None = None) -> bool:
    q = db.query(Organization.id).filter(Organization.slug == slug)
    if exclude_id is not None:
        q = q.filter(Organization.id != exclude_id)
    return q.first() is not None


def _settings_json(settings: Any) -> str:
    if settings is None:
        return json.dumps({})
    if not isinstance(settings, dict):
        raise ValidationError("Settings must be an object")
    return json.dumps(settings, ensure_ascii=False)


def _assignable_role(role: Any) -> str:
    value = validate_enum(role, Role, "Role")
    if value == Role.ADMIN.value:
        raise ValidationError("Admin role cannot be assigned within an organization")
    return value


def _get_managed_organization(db: Session, org_id: int, actor: User, action: str) -> Organization:
    """Membership changes are made by recruiters of the same organization."""
    ensure_role(actor, Role.RECRUITER, message=f"Only recruiters can {action} users.")
    org = _get_organization(db, org_id)
    if not is_member(actor, org.id):
        raise ForbiddenError("You can only manage members of your own organization.")
    return org


def _link_creator(db: Session, org: Organization, user: User) -> None:
    user.organization_id = org.id
    db.flush()


def create_organization(
    db: Session,
    user: User,
    *,
    name: str,
    slug: str,
    plan: str | None = None,
    settings: dict | None = None,
) -> dict:
    ensure_role(user, Role.RECRUITER, message="Only recruiters can create organizations.")
    if user.organization_id:
        raise ConflictError("You already belong to an organization.")

    name = validate_string_field(name, "Name", min_length=2, max_length=150)
    slug = validate_slug(slug)
    plan_value = validate_enum(plan, Plan, "Plan") if plan else Plan.FREE.value
    settings_json = _settings_json(settings)

    if _slug_taken(db, slug):
        raise ConflictError(get_error_message("slug_exists"))

    org = Organization(name=name, slug=slug, plan=plan_value, settings=settings_json)
    try:
        db.add(org)
        db.flush()
        _link_creator(db, org, user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(get_error_message("slug_exists")) from None
    except SQLAlchemyError as e:
        # Roll back the organization insert too; an org without its creator is never kept.
        db.rollback()
        logger.error("Failed to create organization %r for user %s: %s", slug, user.id, e)
        raise DatabaseError(get_error_message("organization_link_failed")) from e

    db.refresh(org)
    logger.info("User %s created organization %s (%s)", user.id, org.id, org.slug)
    return get_organization(db, org.id)


def update_organization(db: Session, org_id: int, caller: User, patch: dict) -> dict:
    ensure_role(caller, Role.RECRUITER, Role.ADMIN, message="Unauthorized to edit this organization.")
    org = _get_organization(db, org_id)
    ensure_member_or_admin(caller, org.id, message="Unauthorized to edit this organization.")

    changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS and v is not None}
    if "name" in changes:
        org.name = validate_string_field(changes["name"], "Name", min_length=2, max_length=150)
    if "slug" in changes:
        slug = validate_slug(changes["slug"])
        if _slug_taken(db, slug, exclude_id=org.id):
            raise ConflictError(get_error_message("slug_exists"))
        org.slug = slug
    if "plan" in changes:
        org.plan = validate_enum(changes["plan"], Plan, "Plan")
    if "settings" in changes:
        org.settings = _settings_json(changes["settings"])

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(get_error_message("slug_exists")) from None
    db.refresh(org)
    logger.info("User %s updated organization %s (%s)", caller.id, org.id, ", ".join(sorted(changes)) or "no changes")
    return organization_to_public(org)


def delete_organization(db: Session, org_id: int, caller: User) -> dict:
    ensure_role(caller, Role.RECRUITER, Role.ADMIN, message="Unauthorized to delete this organization.")
    org = _get_organization(db, org_id)
    ensure_member_or_admin(caller, org.id, message="Unauthorized to delete this organization.")

    job_count = db.query(func.count(Job.id)).filter(Job.organization_id == org.id).scalar() or 0
    if job_count:
        raise ConflictError(get_error_message("organization_has_jobs"))

    try:
        db.query(User).filter(User.organization_id == org.id).update(
            {User.organization_id: None}, synchronize_session="fetch"
        )
        db.delete(org)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting organization") from e

    logger.info("User %s deleted organization %s", caller.id, org_id)
    return {"message": "Organization deleted successfully.", "deleted_organization_id": org_id}


def add_member(db: Session, org_id: int, actor: User, *, email: str, role: str) -> dict:
    org = _get_managed_organization(db, org_id, actor, "add")

    email = validate_email(email)
    role_value = _assignable_role(role)

    existing = db.query(User).filter(User.email == email).first()
    if not existing:
        # No invitation record is stored; the caller decides whether to send one.
        return {
            "invited": False,
            "message": f"User {email} has not signed up yet. Send Invitation mail.",
            "user": None,
        }

    if existing.role == Role.ADMIN.value:
        logger.warning("User %s tried to add platform admin %s to organization %s", actor.id, existing.id, org.id)
        raise ForbiddenError(get_error_message("admin_not_member"))

    if existing.organization_id:
        if existing.organization_id == org.id:
            raise ConflictError(get_error_message("already_in_organization"))
        raise ConflictError(get_error_message("belongs_to_other_organization"))

    existing.organization_id = org.id
    existing.role = role_value
    db.commit()
    db.refresh(existing)
    logger.info("User %s added user %s to organization %s as %s", actor.id, existing.id, org.id, role_value)
    return {"message": "User added to organization successfully.", "user": user_to_public(existing)}


def _get_org_member(db: Session, org_id: int, user_id: int) -> User:
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise NotFoundError(get_error_message("user_not_found"))
    if target.organization_id != org_id:
        raise ForbiddenError(get_error_message("not_organization_member"))
    return target


def update_member(
    db: Session,
    org_id: int,
    actor: User,
    user_id: int,
    *,
    role: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> dict:
    org = _get_managed_organization(db, org_id, actor, "update")
    target = _get_org_member(db, org.id, user_id)

    if role is not None:
        target.role = _assignable_role(role)
    if first_name is not None:
        target.first_name = validate_string_field(first_name, "First name", max_length=120, required=False)
    if last_name is not None:
        target.last_name = validate_string_field(last_name, "Last name", max_length=120, required=False)

    db.commit()
    db.refresh(target)
    return {"message": "User updated successfully.", "user": user_to_public(target)}


def remove_member(db: Session, org_id: int, actor: User, user_id: int) -> dict:
    org = _get_managed_organization(db, org_id, actor, "remove")
    target = _get_org_member(db, org.id, user_id)

    # Non-destructive: only the membership link is cleared.
    target.organization_id = None
    db.commit()
    db.refresh(target)
    logger.info("User %s removed user %s from organization %s", actor.id, target.id, org_id)
    return {"message": "User removed from organization successfully.", "user": user_to_public(target)}


def _members(db: Session, org_id: int) -> list[User]:
    return (
        db.query(User)
        .filter(User.organization_id == org_id)
        .order_by(User.created_at.asc(), User.id.asc())
        .all()
    )


def get_organization(db: Session, org_id: int) -> dict:
    org = _get_organization(db, org_id)
    members = _members(db, org.id)
    job_count = db.query(func.count(Job.id)).filter(Job.organization_id == org.id).scalar() or 0

    payload = organization_to_public(org)
    payload["members"] = [user_to_public(u) for u in members]
    payload["counts"] = {"jobs": int(job_count), "users": len(members)}
    return payload


def get_my_organization(db: Session, user: User) -> dict:
    if not user.organization_id:
        raise NotFoundError("You do not belong to an organization yet.")
    return get_organization(db, user.organization_id)


def list_members(db: Session, org_id: int) -> list[dict]:
    org = _get_organization(db, org_id)
    return [user_to_public(u) for u in _members(db, org.id)]
