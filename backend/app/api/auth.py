from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..models.user import User
from ..schemas.account import parse_account, user_view
from ..utils.dependencies import get_current_user
from ..utils.jwt import token_for_user
from ..utils.security import hash_password, verify_password
from ..utils.validation import validate_email, validate_password
from ..utils.error_handlers import get_error_message, handle_database_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    role: str | None = None  # user / employer / admin; omitted -> user
    companyName: str | None = None  # required for employers only


class LoginRequest(BaseModel):
    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str


def _find_user_by_email(db: Session, email: str) -> User | None:
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "looking up user") from e


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    email = validate_email(payload.email)

    if _find_user_by_email(db, email):
        raise HTTPException(status_code=400, detail=get_error_message("email_exists"))

    account = parse_account(payload.role, payload.companyName)
    validate_password(payload.password)

    try:
        hashed = hash_password(payload.password)
    except ValueError:
        raise HTTPException(status_code=400, detail=get_error_message("weak_password")) from None

    user = User(
        email=email,
        password=hashed,
        role=account.role,
        company_name=account.company_name,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating user") from e

    logger.info("Registered %s account id=%s", user.role, user.id)
    return {
        "success": True,
        "token": token_for_user(user),
        "user": user_view(user),
    }


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    # Unknown email and wrong password are indistinguishable to the caller.
    email = (payload.email or "").strip().lower()
    user = _find_user_by_email(db, email) if email else None

    if not user or not verify_password(payload.password, user.password):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=400, detail=get_error_message("invalid_credentials"))

    return {
        "success": True,
        "token": token_for_user(user),
        "user": user_view(user),
    }


@router.get("/profile")
def profile(db: Session = Depends(get_db), user=Depends(get_current_user)):
    try:
        # Column projection: the password hash is never loaded.
        row = (
            db.query(User.id, User.email, User.role, User.company_name, User.created_at)
            .filter(User.id == int(user.get("sub")))
            .first()
        )
    except ValueError:
        row = None
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching profile") from e

    if not row:
        raise HTTPException(status_code=404, detail=get_error_message("user_not_found"))

    data = user_view(row)
    data["createdAt"] = row.created_at.isoformat() if row.created_at else None
    return {"success": True, "data": data}


@router.put("/password")
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        record = db.query(User).filter(User.id == int(user.get("sub"))).first()
    except ValueError:
        record = None
    if not record:
        raise HTTPException(status_code=404, detail=get_error_message("user_not_found"))

    if not verify_password(payload.currentPassword, record.password):
        raise HTTPException(status_code=400, detail=get_error_message("wrong_password"))

    validate_password(payload.newPassword)
    record.password = hash_password(payload.newPassword)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "changing password") from e

    return {"success": True, "message": "Password updated successfully"}
