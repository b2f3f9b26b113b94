from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional

from schemas.common import ORMBase

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests
class UserCreate(UserBase):
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=255)
    confirm_password: str = Field(min_length=8, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=15)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Password and confirm password do not match")
        return self

# Output schema for user profile details
class UserResponse(ORMBase):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str

# Login result: profile plus the access token
class LoginResponse(UserResponse):
    token: str
    token_type: str = "bearer"

# Compact form used inside ledger references
class UserRef(ORMBase):
    id: int
    name: str
    email: str
