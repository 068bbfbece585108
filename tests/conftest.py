import datetime as dt
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from healthflow.config import Settings
from healthflow.database import seed_demo_data
from healthflow.main import create_app
from healthflow.services.store import RecordStore

CLINIC_TZ = "America/Sao_Paulo"
FIXED_NOW = dt.datetime(2026, 10, 17, 10, 0, tzinfo=ZoneInfo(CLINIC_TZ))


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store(clock) -> RecordStore:
    return RecordStore(tz_name=CLINIC_TZ, clock=clock)


@pytest.fixture
def seeded_store(store: RecordStore) -> RecordStore:
    seed_demo_data(store)
    return store


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, SEED_DEMO_DATA=False, TIMEZONE=CLINIC_TZ, ENV="test")


@pytest.fixture
def client(settings: Settings, clock) -> TestClient:
    return TestClient(create_app(settings, clock=clock))


@pytest.fixture
def seeded_client(settings: Settings, clock) -> TestClient:
    cfg = settings.model_copy(update={"SEED_DEMO_DATA": True})
    return TestClient(create_app(cfg, clock=clock))
