# tests/api/conftest.py
import pytest
from starlette.testclient import TestClient

from negotiation_service.db.session import get_db
from negotiation_service.main import app


@pytest.fixture(scope="function")
def client(db):
    """
    TestClient bound to the in-memory test session.
    Authentication is real: requests carry JWTs signed with the test secret.
    """
    app.dependency_overrides[get_db] = lambda: db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
