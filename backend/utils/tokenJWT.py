# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from utils.errors import AuthError

# The raw token travels in the "authorization" header (no scheme required)
token_header = APIKeyHeader(name="authorization", auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def _strip_scheme(token: str) -> str:
    token = token.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token

# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    token: Optional[str] = Depends(token_header),
    db: Session = Depends(get_db)
):
    if not token:
        raise AuthError("Please login to continue")

    try:
        payload = jwt.decode(_strip_scheme(token), settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        subject = payload.get("sub")
        # Ensure the subject is present in the token payload
        if subject is None:
            raise AuthError("Invalid token payload")
        user_id = int(subject)
    except (JWTError, ValueError):
        raise AuthError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthError("User not found")
    return user
