import pytest
from fastapi.testclient import TestClient

from customer_records.application.service import CustomerService
from customer_records.core_settings import Settings
from customer_records.infrastructure.db import Database
from customer_records.main import create_app


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'store.db'}")
    db.init_models()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as db:
        yield db


@pytest.fixture
def service(session):
    return CustomerService(session)


@pytest.fixture
def client(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}", LOG_LEVEL="WARNING")
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def ann():
    return {"first_name": "Ann", "last_name": "Lee", "phone_number": "+1 (555) 123-4567"}


@pytest.fixture
def home_address():
    return {"address_details": "12 Park Street", "city": "Pune", "state": "Maharashtra", "pin_code": "411001"}
