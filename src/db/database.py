"""Generate database session"""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import DatabaseSettings
from src.db.schema import Base


def create_db_engine(settings: Optional[DatabaseSettings] = None) -> Engine:
    """Create the engine and make sure all tables exist"""
    settings = settings or DatabaseSettings()
    engine = create_engine(settings.url, echo=settings.echo)
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
