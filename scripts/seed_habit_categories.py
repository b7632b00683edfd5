"""
Seed the default habit categories.

SAFE to run multiple times (matches by name, won't duplicate entries).
Run after migrations, before the first user starts a habit.
"""
import sys
import os

# Add the parent directory to the path so we can import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.db.session import SessionLocal  # noqa: E402
from app.catalog.catalog import seed_default_categories  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402


def main() -> int:
    configure_logging()
    db = SessionLocal()
    try:
        created = seed_default_categories(db)
        print(f"Habit categories seeded. Created: {created}")
        return 0
    except Exception as e:
        db.rollback()
        print(f"ERROR: Failed to seed habit categories: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
