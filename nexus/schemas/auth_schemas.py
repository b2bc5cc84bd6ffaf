from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel

from nexus.schemas.base import CamelModel

Role = Literal["student", "teacher"]


class SignupRequest(CamelModel):
    email: str
    password: str
    display_name: Optional[str] = None
    institution: Optional[str] = None
    role: Role = "student"
    primary_subject: Optional[str] = None


class LoginRequest(CamelModel):
    email: str
    password: str


class UserResponse(CamelModel):
    id: str
    email: str
    display_name: Optional[str] = None
    institution: Optional[str] = None
    role: Role
    primary_subject: Optional[str] = None


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse


class AuthTokenPayload(BaseModel):
    sub: str
    role: Optional[str] = None
    exp: Optional[datetime] = None
