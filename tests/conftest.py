"""Shared fixtures: settings factory and patched external tools."""

from __future__ import annotations

import pytest

from backup_mailer.config import MongoCredentials, Settings
from backup_mailer.pipeline import dump, preflight

from fakes import FakeMongodump


@pytest.fixture
def make_settings(tmp_path):
    def factory(**overrides) -> Settings:
        values = dict(
            database_name="orders",
            backup_dir=tmp_path / "b",
            from_email="backups@example.com",
            to_email="ops@example.com",
            api_key="SG.test-key",
        )
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def auth_settings(make_settings):
    return make_settings(
        credentials=MongoCredentials(
            username="backup-user", password="hunter2-secret", auth_db="admin"
        )
    )


@pytest.fixture
def fake_mongodump(monkeypatch):
    fake = FakeMongodump()
    monkeypatch.setattr(dump.subprocess, "run", fake)
    return fake


@pytest.fixture
def tools_present(monkeypatch):
    monkeypatch.setattr(preflight.shutil, "which", lambda tool: f"/usr/bin/{tool}")
