# Test configuration
import itertools
import os
from datetime import datetime, timezone

# Set test environment variables BEFORE importing app modules
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-32chars"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # Lower rounds for faster tests
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from catalog_service.app import create_app  # noqa: E402
from catalog_service.auth_gate import AuthGate  # noqa: E402
from catalog_service.config import Settings  # noqa: E402
from catalog_service.repositories import (  # noqa: E402
    JsonRecordStore,
    ProductRepository,
    UserRepository,
)
from catalog_service.services import AuthService  # noqa: E402

TEST_SECRET = "test-secret-key-for-testing-only-32chars"
FIXED_NOW = datetime(2024, 6, 15, 12, 30, 45, 123000, tzinfo=timezone.utc)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPassword123!"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing DATA_DIR at a fresh temporary directory."""
    return Settings(
        JWT_SECRET_KEY=TEST_SECRET,
        DATA_DIR=tmp_path / "data",
        PASSWORD_HASH_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def user_store(settings):
    return JsonRecordStore(settings.users_file, "users")


@pytest.fixture
def product_store(settings):
    return JsonRecordStore(settings.products_file, "products")


@pytest.fixture
def user_repo(user_store, id_factory, clock):
    return UserRepository(user_store, id_factory=id_factory, clock=clock)


@pytest.fixture
def product_repo(product_store, id_factory, clock):
    return ProductRepository(product_store, id_factory=id_factory, clock=clock)


@pytest.fixture
def auth_gate(settings, user_repo):
    return AuthGate(settings, user_repo)


@pytest.fixture
def auth_service(settings, user_repo, auth_gate):
    return AuthService(settings, user_repo, auth_gate)


@pytest.fixture
def client(settings):
    """Test client over a fresh app with a seeded bootstrap admin."""
    app_settings = settings.model_copy(
        update={"ADMIN_EMAIL": ADMIN_EMAIL, "ADMIN_PASSWORD": ADMIN_PASSWORD}
    )
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
