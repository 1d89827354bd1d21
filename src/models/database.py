"""
Database configuration and session management
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from loguru import logger
from typing import Generator

from models.database_models import Base
from utils.config_loader import BASE_DIR, get_settings

DB_PATH = BASE_DIR / "edustudio.db"


def resolve_database_url() -> str:
    env_db_url = get_settings().database_url
    if env_db_url:
        return env_db_url
    # SQLite URL format: sqlite:///C:/path/to/file.db
    clean_path = str(DB_PATH).replace('\\', '/')
    return f"sqlite:///{clean_path}"


DATABASE_URL = resolve_database_url()
logger.info(f"Using database URL: {DATABASE_URL.split('@')[-1]}")


def make_engine(url: str) -> Engine:
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {}
    )


# Create engine
engine = make_engine(DATABASE_URL)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """
    Create all database tables
    """
    Base.metadata.create_all(bind=engine)
