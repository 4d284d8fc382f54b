import pytest
from fastapi.testclient import TestClient

from healthreport.api import app, reset_store
from healthreport.store import ReportStore


@pytest.fixture
def store():
    return reset_store(ReportStore())


@pytest.fixture
def client(store):
    return TestClient(app)
