from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class UserRole(str, Enum):
    OWNER = 'owner'
    DATA_ENTRY = 'data_entry'
    ORGANIZER = 'organizer'

    @classmethod
    def values(cls) -> List[str]:
        return [r.value for r in cls]


def _clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if not value:
        raise ValueError('Email cannot be empty')
    return value


class UserBase(BaseModel):
    email: str
    full_name: Optional[str] = None
    role: UserRole

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _clean_email(value)


class UserCreate(UserBase):
    id: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    password: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _clean_email(value)


class User(UserBase):
    """Public user representation, never carries the password."""

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user: User
    access_token: str
    token_type: str
