import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError

from tenant_tracker.config import settings
from tenant_tracker.core.exceptions import ConflictException

logger = logging.getLogger(__name__)

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# SQLite pools reject sizing arguments
pool_kwargs = (
    {}
    if _is_sqlite
    else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    **pool_kwargs,
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session, conflict_message: str):
    """
    Run a unit of work and commit it once.

    Every write staged inside the block is committed together or rolled back
    together. Unique-constraint violations and optimistic-lock failures
    (a concurrent writer got there first) surface as ConflictException.

    Usage:
        with atomic(db, "Tenant is already assigned"):
            repo.add(...)
            other_repo.add(...)
    """
    try:
        yield
        db.commit()
    except (IntegrityError, StaleDataError) as e:
        db.rollback()
        logger.warning("Rolled back conflicting write: %s", e.__class__.__name__)
        raise ConflictException(conflict_message) from e
    except Exception:
        db.rollback()
        raise
