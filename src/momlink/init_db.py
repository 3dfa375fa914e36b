"""Create the schema and seed the stock groups for local development.

Deployed databases are managed with Alembic (``alembic upgrade head``).
"""

from momlink.core.settings import settings
from momlink.db.session import SessionLocal, create_tables
from momlink.services.groups import seed_default_groups


def init_db() -> int:
    """Create all tables and, if enabled, seed the default groups.

    Returns:
        Number of groups seeded.
    """
    create_tables()
    if not settings.seed_default_groups:
        return 0
    db = SessionLocal()
    try:
        return seed_default_groups(db)
    finally:
        db.close()


if __name__ == "__main__":
    seeded = init_db()
    print(f"Database initialized ({seeded} groups seeded).")
