import os
import tempfile
from collections.abc import Generator

# Settings are read on import; point them at throwaway locations first.
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="collaborations-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from app import models  # noqa: F401
from app.api.deps import get_db
from app.core.db import build_engine
from app.main import app
from app.realtime.feed import ChangeFeed

from .fixtures.factories import *


@pytest.fixture(scope="function")
def test_engine() -> Generator[Engine, None, None]:
    # A private in-memory database per test stands in for the hosted store.
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function", autouse=True)
def db_transaction(test_engine: Engine) -> Generator[Session, None, None]:
    session = Session(test_engine)

    def override_get_db() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = override_get_db

    yield session

    session.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
