from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..services import auth as auth_service
from ..services.projections import user_to_public
from ..utils.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None  # defaults to CANDIDATE


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    result = auth_service.register(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    return {"success": True, "message": "User created successfully", **result}


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = auth_service.login(db, email=payload.email, password=payload.password)
    return {"success": True, **result}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"success": True, "user": user_to_public(user, include_organization=True)}


@router.post("/logout")
def logout():
    # Tokens are stateless; the client simply discards its copy.
    return {"success": True, "message": "Logged out successfully"}
