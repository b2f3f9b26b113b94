# backend/models/users.py
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    phone = Column(String(15), nullable=True)
    role = Column(String, nullable=False, default="staff")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
