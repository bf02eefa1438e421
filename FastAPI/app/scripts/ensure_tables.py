import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from app.database import ensure_tables_exist


def main():
    created = ensure_tables_exist()
    if created:
        print(f"Created tables: {', '.join(created)}")
    else:
        print("DB table check complete: nothing to create.")


if __name__ == "__main__":
    main()
