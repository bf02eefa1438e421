"""
Set a user's role by email (candidate, mediator, admin).
Usage: python -m app.scripts.set_role user@example.com admin
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from app.database import SessionLocal, ensure_tables_exist
from app.models.user import Role
from app.repos.user_repo import get_by_email, update

USAGE = "Usage: python -m app.scripts.set_role <email> <candidate|mediator|admin>"


def main():
    if len(sys.argv) < 3:
        print(USAGE)
        sys.exit(1)
    email = sys.argv[1].strip()
    try:
        role = Role(sys.argv[2].strip().lower())
    except ValueError:
        print(USAGE)
        sys.exit(1)
    ensure_tables_exist()
    db = SessionLocal()
    try:
        user = get_by_email(db, email)
        if not user:
            print(f"User not found: {email}")
            sys.exit(1)
        update(db, user.id, role=role.value)
        print(f"Set role of {email} to {role.value}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
