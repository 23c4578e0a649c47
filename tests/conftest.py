from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the accounts package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from accounts.core import config as core_config  # noqa: E402
from accounts.db import models  # noqa: E402
from accounts.db import session as db_session  # noqa: E402
from accounts.repositories.sql_repository import SQLRepository  # noqa: E402

TEST_SECRET = "test-secret-with-enough-entropy-for-hs256!"


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.reset_engines()


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset cached settings/engine."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("SECRET_STR", TEST_SECRET)
    monkeypatch.setenv("LOGIN_EXPIRES", "1h")
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://testserver")
    monkeypatch.setenv("APP_ENV", "test")
    for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD", "SMTP_FROM"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def repo(db_env) -> SQLRepository:
    return SQLRepository()


@pytest.fixture()
def client(db_env) -> TestClient:
    from accounts.app import create_app

    return TestClient(create_app())


@pytest.fixture()
def signup(client):
    """Create an account through the API and return the JSON body."""

    def _signup(email: str = "a@x.com", password: str = "secret123", **extra) -> dict:
        resp = client.post("/api/v1/users/signup", json={"email": email, "password": password, **extra})
        assert resp.status_code == 201, resp.text
        # tests authenticate explicitly through the Authorization header
        client.cookies.clear()
        return resp.json()

    return _signup


@pytest.fixture()
def admin_headers(client, signup, repo) -> dict:
    body = signup("admin@x.com", "adminpass1")
    repo.update_user(body["data"]["user"]["id"], {"role": "admin"})
    return {"Authorization": f"Bearer {body['token']}"}
