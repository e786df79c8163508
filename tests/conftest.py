from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.api_main import app, get_storage
from backend.db import make_engine, make_session_factory
from backend.services import Storage, init_db


@pytest.fixture()
def engine():
    eng = make_engine("sqlite:///:memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def store(engine) -> Storage:
    return Storage(make_session_factory(engine))


@pytest.fixture()
def client(store: Storage):
    app.dependency_overrides[get_storage] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def appointment_data() -> dict:
    return {
        "title": "Strategy Meeting",
        "clientName": "Alice Smith",
        "date": "2026-01-14",
        "time": "10:00 AM",
        "duration": "1h",
        "location": "Zoom Meeting",
        "type": "Consultation",
    }


@pytest.fixture()
def client_data() -> dict:
    return {
        "name": "Alice Smith",
        "company": "Acme Corp",
        "email": "alice@acme.com",
        "phone": "+1 (555) 123-4567",
        "location": "New York, NY",
        "tags": ["VIP", "Tech"],
    }


@pytest.fixture()
def invoice_data() -> dict:
    return {
        "invoiceNumber": "INV-001",
        "clientName": "Acme Corp",
        "amount": "4500.00",
        "dueDate": "2026-02-01",
        "items": 3,
    }


@pytest.fixture()
def transaction_data() -> dict:
    return {"title": "Lunch", "client": "Acme", "amount": "12.50", "type": "expense"}
