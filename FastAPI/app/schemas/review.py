from typing import Literal

from pydantic import BaseModel, Field


class ChangeRequest(BaseModel):
    feedback: str = Field(min_length=1, max_length=5000)
    expected_version: int | None = None


class ReviewDecision(BaseModel):
    """Body for forward / hire / reject; feedback is optional."""

    feedback: str | None = Field(default=None, max_length=5000)
    expected_version: int | None = None


class QueueReturn(BaseModel):
    expected_version: int | None = None


class RankRequest(BaseModel):
    job_description: str = Field(min_length=20, max_length=50000)
    limit: int | None = Field(default=None, ge=1, le=100)


class RankedCandidate(BaseModel):
    rank: int
    resume_id: str
    owner_id: str
    full_name: str
    version: int
    match_score: int
    match_reason: str
    missing_skills: list[str] = []
    shortlist_decision: Literal["Strong Yes", "Maybe", "Reject"] = "Maybe"
    top_strengths: list[str] = []
    red_flags: list[str] = []
    source: str
