# backend/routes/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import user as schemas
from schemas.common import Envelope, envelope
from utils.errors import AuthError, ConflictError, NotFoundError
from utils.hashing import get_password_hash, verify_password
from utils.integrity import commit_or_conflict
from utils.tokenJWT import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _serialize(user: User) -> dict:
    return schemas.UserResponse.model_validate(user).model_dump(mode="json")


def _find_existing(db: Session, email: str, name: str):
    return db.query(User).filter(or_(func.lower(User.email) == email, User.name == name)).first()


# Register a new user
@router.post("/register", status_code=201, response_model=Envelope[schemas.UserResponse])
def register(payload: schemas.UserCreate, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = payload.email.strip().lower()
    name = payload.name.strip()

    existing = _find_existing(db, normalized_email, name)
    if existing:
        reason = "Email has been used" if existing.email.lower() == normalized_email else "Name has been used"
        logger.info("Registration rejected for %s: %s", normalized_email, reason)
        raise ConflictError(reason)

    user = User(
        name=name,
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        phone=payload.phone_number,
        role="staff",
    )
    db.add(user)
    commit_or_conflict(db, "Email or name has been used")
    db.refresh(user)

    logger.info("User %s registered (%s)", user.id, user.email)
    return envelope(_serialize(user), "User registered successfully", 201)


# Authenticate user and issue JWT token
@router.post("/login", response_model=Envelope[schemas.LoginResponse])
def login(payload: schemas.UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == payload.email.strip().lower()).first()

    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise AuthError("Invalid email or password")

    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    logger.info("User %s logged in", user.id)

    data = _serialize(user)
    data.update({"token": token, "token_type": "bearer"})
    return envelope(data, "Authentication successful")


# Retrieve current authenticated user details
@router.get("/me", response_model=Envelope[schemas.UserResponse])
def me(current_user: User = Depends(get_current_user)):
    return envelope(_serialize(current_user), "User retrieved successfully")


@router.get("", response_model=Envelope[List[schemas.UserResponse]])
def list_users(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return envelope([_serialize(u) for u in users], "Users retrieved successfully")


@router.get("/{user_id}", response_model=Envelope[schemas.UserResponse])
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return envelope(_serialize(user), "User retrieved successfully")


@router.delete("/{user_id}", response_model=Envelope)
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by user %s", user_id, current_user.id)
    return envelope(None, "User deleted successfully")
