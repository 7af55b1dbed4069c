from __future__ import annotations

import pytest

from classroom_attendance.main import create_app
from tests.fakes import build_campus


@pytest.fixture
def campus():
    return build_campus()


@pytest.fixture
def app(campus, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=campus.container)


@pytest.fixture
def client(app):
    return app.test_client()
