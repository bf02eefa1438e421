from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.models.resume import ResumeStatus


class _Entry(BaseModel):
    id: str | None = None

    class Config:
        extra = "allow"


class Experience(_Entry):
    role: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""


class Education(_Entry):
    degree: str = ""
    school: str = ""
    year: str = ""


class Skill(_Entry):
    name: str
    level: Literal["Beginner", "Intermediate", "Expert"] = "Intermediate"
    category: Literal["Technical", "Soft", "Tool"] | None = None


class Project(_Entry):
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    link: str | None = None


class Certification(_Entry):
    name: str = ""
    issuer: str = ""
    year: str = ""


class ResumeContent(BaseModel):
    """Free-form resume body. Only submission guards look inside it."""

    template_id: Literal["executive", "modern", "classic"] | None = None
    full_name: str = ""
    email: str = ""
    phone: str = ""
    summary: str = ""
    location: str | None = None
    website: str | None = None
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)

    class Config:
        extra = "allow"


class ResumeSave(BaseModel):
    content: ResumeContent
    expected_version: int | None = None


class ResumeSubmit(BaseModel):
    content: ResumeContent | None = None
    expected_version: int | None = None


class ResumeResponse(BaseModel):
    id: str
    owner_id: str
    status: ResumeStatus
    feedback: str | None = None
    content: dict[str, Any]
    version: int
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class VersionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)


class VersionResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    data: dict[str, Any]
    created_at: datetime | None = None

    class Config:
        from_attributes = True
