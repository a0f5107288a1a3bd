import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront.database import Database  # noqa: E402
from storefront.main import app  # noqa: E402
from tests.factories import auth_headers  # noqa: E402


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    app.state.database = database
    try:
        yield TestClient(app)
    finally:
        del app.state.database


@pytest.fixture
def admin_headers():
    return auth_headers("admin", "admin", email="admin@example.com")
