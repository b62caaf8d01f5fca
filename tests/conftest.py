import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from payroll.config import get_settings  # noqa: E402
from payroll.db import engine as db_engine  # noqa: E402
from payroll.services.seeding import seed_tax_brackets  # noqa: E402


@pytest.fixture
def session_factory():
    db_engine.init_engine_from_url("sqlite://")
    db_engine.create_tables()
    yield db_engine.get_session_factory()
    db_engine.reset_engine()


@pytest.fixture
def session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seeded_session(session):
    seed_tax_brackets(session)
    session.commit()
    return session


@pytest.fixture
def api_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    monkeypatch.setenv("SEED_EMPLOYEES", "false")
    monkeypatch.setenv("LOG_DIR", "")
    monkeypatch.delenv("FEATURE_TAX_OVERRIDE", raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def client(api_env):
    from payroll.api.http import app as api_app

    with TestClient(api_app) as test_client:
        yield test_client
