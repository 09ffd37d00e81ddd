from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from .config import DATABASE_URL, SQL_ECHO

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task  # noqa: F401

def _create_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=SQL_ECHO,
            connect_args={"check_same_thread": False},
        )

    # Server databases: no pooling between calls, pre-ping each connection
    return create_engine(
        url,
        echo=SQL_ECHO,
        pool_pre_ping=True,
        poolclass=NullPool,
    )

engine = _create_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=Session)

def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind=None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)
