from enum import Enum

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class ResumeStatus(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    CHANGES_REQUESTED = "changes_requested"
    FORWARDED_TO_ADMIN = "forwarded_to_admin"
    HIRED = "hired"
    REJECTED = "rejected"


TERMINAL_STATUSES = frozenset({ResumeStatus.HIRED, ResumeStatus.REJECTED})
# Owner may edit content only in these.
EDITABLE_STATUSES = frozenset({ResumeStatus.DRAFT, ResumeStatus.CHANGES_REQUESTED})


class Resume(Base):
    """The owner's current resume. One row per owner; status moves only through review_workflow."""

    __tablename__ = "resumes"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    status = Column(String, nullable=False, default=ResumeStatus.DRAFT.value, index=True)
    feedback = Column(Text, nullable=True)
    content = Column(JSONType, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="resume")
