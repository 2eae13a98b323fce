# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; name and role are added here

import uuid
from typing import List, Literal

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, field_validator

UserRole = Literal["admin", "manager", "staff"]


def _required_name(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("name is required")
    return v


class UserRead(schemas.BaseUser[uuid.UUID]):
    name: str
    role: UserRole


class UserCreate(schemas.BaseUserCreate):
    name: str
    role: UserRole = "staff"

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return _required_name(v)


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserMe(UserRead):
    permissions: List[str]


class SetupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return _required_name(v)


class SetupStatus(BaseModel):
    setup_needed: bool
