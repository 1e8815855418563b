"""Engine and session factory for the configured database."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from backend.app.core.settings import get_settings

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
