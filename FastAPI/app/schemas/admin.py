from pydantic import BaseModel, EmailStr, Field

from app.models.user import Role


class AdminUserCreate(BaseModel):
    name: str = ""
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role = Role.CANDIDATE
    is_active: bool = True


class AdminUserUpdate(BaseModel):
    name: str | None = None
    role: Role | None = None
    is_active: bool | None = None
