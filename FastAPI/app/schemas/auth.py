from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.models.user import Role

PASSWORD_MIN_LENGTH = 8


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserRegister(UserLogin):
    """Self-service sign-up. There is no role field: new accounts are always candidates."""

    name: str = Field(default="", max_length=120)
    confirm_password: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserResponse(BaseModel):
    id: str
    name: str = ""
    email: str
    role: Role
    has_resume: bool = False


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
