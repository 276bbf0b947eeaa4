"""
Pydantic schemas for user-related request/response validation.
"""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from eventspot.schemas.common import CamelModel


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=32)
    city: Optional[str] = Field(None, max_length=100)


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(CamelModel):
    id: int
    username: str
    name: str
    email: str
    phone: Optional[str] = None
    city: Optional[str] = None


class UserEnvelope(BaseModel):
    user: UserResponse


class AuthStatus(CamelModel):
    is_authenticated: bool
    user: Optional[UserResponse] = None
