"""
Seed demo accounts (admin, mediator, candidate) and put the candidate's resume in the review queue.
Usage: python -m app.scripts.seed_demo [password]
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from app.database import SessionLocal, ensure_tables_exist
from app.logging_config import setup_logging
from app.models.resume import ResumeStatus
from app.models.user import Role
from app.repos.resume_repo import get_by_owner
from app.repos.user_repo import get_by_email, create as create_user
from app.services.review_workflow import Actor, save_draft, submit

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "demo-password"
DEMO_USERS = [
    ("System Admin", "admin@system.com", Role.ADMIN),
    ("Sarah Reviewer", "sarah@mediator.com", Role.MEDIATOR),
    ("Jordan Lee", "jordan.demo@example.com", Role.CANDIDATE),
]
DEMO_RESUME = {
    "template_id": "modern",
    "full_name": "Jordan Lee",
    "email": "jordan.demo@example.com",
    "phone": "",
    "summary": "Aspiring Product Designer with a background in graphic design.",
    "experience": [
        {
            "id": "exp-1",
            "role": "Graphic Designer",
            "company": "Studio North",
            "duration": "2021 - Present",
            "description": "Brand systems and marketing collateral for B2B clients.",
        }
    ],
    "education": [{"id": "edu-1", "degree": "BFA Design", "school": "State University", "year": "2021"}],
    "skills": [{"id": "sk-1", "name": "Figma", "level": "Expert", "category": "Tool"}],
    "projects": [],
    "certifications": [],
}


def seed(db, password: str = DEFAULT_PASSWORD) -> dict:
    users = {}
    for name, email, role in DEMO_USERS:
        user = get_by_email(db, email)
        if not user:
            user = create_user(db, email, password, name=name, role=role.value)
            logger.info("Seeded %s user %s", role.value, email)
        users[role] = user

    candidate = Actor.from_user(users[Role.CANDIDATE])
    resume = get_by_owner(db, candidate.id)
    if resume is None:
        resume = save_draft(db, candidate, DEMO_RESUME)
    if resume.status == ResumeStatus.DRAFT.value:
        resume = submit(db, candidate)
    return {"users": len(users), "resume_status": resume.status}


def main():
    setup_logging()
    password = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PASSWORD
    ensure_tables_exist()
    db = SessionLocal()
    try:
        out = seed(db, password)
        print(f"Seeded {out['users']} demo users; candidate resume is {out['resume_status']}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
