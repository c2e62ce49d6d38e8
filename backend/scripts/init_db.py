"""Initialize the changelog database - creates (or recreates with --reset) all tables."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, Base
import app.models  # noqa: F401 - registers all models


def init_db(reset: bool = False):
    if reset:
        print("Dropping existing changelog tables...")
        Base.metadata.drop_all(bind=engine)
    print("Creating profile, issue and changelog tables...")
    Base.metadata.create_all(bind=engine)
    print(f"Database initialized: {engine.url}")


if __name__ == "__main__":
    init_db(reset="--reset" in sys.argv[1:])
