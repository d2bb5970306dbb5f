from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import organizations as org_service
from ..utils.dependencies import get_current_user

router = APIRouter(prefix="/organizations", tags=["Organizations"])


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=2, max_length=150)
    slug: str = Field(min_length=2, max_length=100)
    plan: str | None = None
    settings: dict[str, Any] | None = None


class OrganizationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=150)
    slug: str | None = Field(default=None, min_length=2, max_length=100)
    plan: str | None = None
    settings: dict[str, Any] | None = None


class MemberAdd(BaseModel):
    email: str
    role: str


class MemberUpdate(BaseModel):
    role: str | None = None
    first_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)


@router.post("", status_code=201)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    organization = org_service.create_organization(
        db,
        user,
        name=payload.name,
        slug=payload.slug,
        plan=payload.plan,
        settings=payload.settings,
    )
    return {"success": True, "message": "Organization created successfully", "organization": organization}


@router.get("/me")
def my_organization(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "organization": org_service.get_my_organization(db, user)}


@router.get("/{org_id:int}")
def get_organization(org_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "organization": org_service.get_organization(db, org_id)}


@router.put("/{org_id:int}")
def update_organization(
    org_id: int,
    payload: OrganizationUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    organization = org_service.update_organization(db, org_id, user, payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Organization updated successfully", "organization": organization}


@router.delete("/{org_id:int}")
def delete_organization(org_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, **org_service.delete_organization(db, org_id, user)}


@router.post("/{org_id:int}/members", status_code=201)
def add_member(
    org_id: int,
    payload: MemberAdd,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return {"success": True, **org_service.add_member(db, org_id, user, email=payload.email, role=payload.role)}


@router.get("/{org_id:int}/members")
def list_members(org_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "members": org_service.list_members(db, org_id)}


@router.patch("/{org_id:int}/members/{user_id:int}")
def update_member(
    org_id: int,
    user_id: int,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    result = org_service.update_member(
        db,
        org_id,
        user,
        user_id,
        role=payload.role,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    return {"success": True, **result}


@router.delete("/{org_id:int}/members/{user_id:int}")
def remove_member(org_id: int, user_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, **org_service.remove_member(db, org_id, user, user_id)}
