"""Shared fixtures: an isolated in-memory database per test."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TICK_SCHEDULER_ENABLED", "false")

import pytest
from sqlalchemy.orm import sessionmaker

from tycoon.database import Base, make_engine
import tycoon.models  # noqa: F401


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
