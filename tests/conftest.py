"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import AISettings, Settings
from src.db.repository import InMemoryGameRepository
from src.db.schema import Base
from src.services.chess_service import ChessService

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def fast_settings() -> Settings:
    """Engines do not pretend to think: keeps the test suite fast."""
    return Settings(ai=AISettings(random_max_think_ms=0, heuristic_think_ms_per_ply=0))


@pytest.fixture
def service(fast_settings: Settings) -> ChessService:
    """Service on top of the in-memory repository, with a seeded random generator"""
    return ChessService(
        InMemoryGameRepository(), fast_settings, rng=random.Random(1234)
    )
