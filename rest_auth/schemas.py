from pydantic import BaseModel, ConfigDict, EmailStr, Field

from datetime import datetime
from typing import Optional

from .models import Role


class AccountCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    password_old: str = Field(..., alias="passwordOld", min_length=8, max_length=100)


class AccountLogin(BaseModel):
    login: str
    password: str


class AccountId(BaseModel):
    id: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    token: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    refresh_token: str = Field(..., alias="refreshToken")


class AccountOut(BaseModel):
    """Client-facing account, never carries the password hash."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
