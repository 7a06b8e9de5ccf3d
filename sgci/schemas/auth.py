"""
S.G.C.I. - Auth Schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from sgci.core.permissions import UserRole, UserStatus


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: dict


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: Optional[str] = None
    role: UserRole = UserRole.CORRETOR
    status: UserStatus = UserStatus.APPROVED
    corretor_id: Optional[str] = Field(None, alias="corretorId")

    class Config:
        populate_by_name = True


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    status: str
    corretorId: Optional[str] = None
    lastLoginAt: Optional[str] = None
    approvedAt: Optional[str] = None
    approvedBy: Optional[str] = None
    createdAt: Optional[str] = None

    class Config:
        from_attributes = True
