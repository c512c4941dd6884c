from datetime import date

import pytest
from fastapi.testclient import TestClient

from fmw2.api.main import create_app
from fmw2.config import settings


@pytest.fixture
def today():
    # Tuesday
    return date(2025, 6, 3)


@pytest.fixture
def off_values():
    return {
        "rank": "CPL",
        "name": "tan ah kow",
        "typeOff": "Leave",
        "startDate": "2025-06-03",
        "endDate": "2025-06-05",
        "balance": "4.5",
        "recommendedBy": "ME3 Alex",
    }


@pytest.fixture
def client(tmp_path, monkeypatch):
    """
    Fresh app on a throwaway SQLite log store, auth disabled.
    """
    monkeypatch.setattr(settings.storage, "backend", "sqlite")
    monkeypatch.setattr(settings.security, "api_token", None)
    monkeypatch.setattr(settings.security, "basic_user", None)
    monkeypatch.setattr(settings.security, "basic_pass", None)
    monkeypatch.setattr(settings.logging, "record_generations", True)
    app = create_app(db_path=tmp_path / "fmw2.db")
    return TestClient(app)
