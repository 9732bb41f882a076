from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from seatbook.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Sync endpoints run in a threadpool; one request may span threads
        return {"connect_args": {"check_same_thread": False}}
    # Stale pooled connections are replaced rather than failing a booking mid-transaction
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """One session per request; routes and services decide when to commit."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
