"""Shared pytest fixtures for the site backend tests."""
import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.db import build_services
from app.main import create_app
from sitestore.config import Settings

PASSWORD = "letmein"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    site = Settings(
        site_root=str(tmp_path / "site"),
        dashboard_password=PASSWORD,
        session_secret="test-secret",
    )
    site.ensure_dirs()
    return site


@pytest.fixture
def services(settings: Settings):
    return build_services(settings)


@pytest.fixture
def now() -> datetime.datetime:
    return datetime.datetime(2026, 10, 18, 12, 0, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def dashboard(client: TestClient) -> TestClient:
    response = client.post("/api/login", json={"password": PASSWORD})
    assert response.status_code == 200
    return client
