# FILE: roadmapx/db.py
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

# Database path: ./data/roadmapx.db relative to project root
# Override with ROADMAPX_DATABASE_URL env var (e.g. a PostgreSQL URL)
DATABASE_URL = os.getenv("ROADMAPX_DATABASE_URL", "sqlite:///./data/roadmapx.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,  # Required for SQLite
    echo=False,  # Set True to log SQL statements for debugging
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency that yields a DB session and closes it after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def import_models():
    """Import every model module so Base.metadata knows about all tables."""
    from roadmapx.users import models as _users  # noqa: F401
    from roadmapx.roadmaps import models as _roadmaps  # noqa: F401
    from roadmapx.progress import models as _progress  # noqa: F401
    from roadmapx.files import models as _files  # noqa: F401


def init_db():
    """Create all tables. Call once at startup."""
    import_models()
    Base.metadata.create_all(bind=engine)
