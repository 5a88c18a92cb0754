"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from habitpulse.config import BaseConfig, DevConfig, TestConfig
from habitpulse.context import create_app_context


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "HABITPULSE_DATA_DIR",
        "HABITPULSE_DEV_MODE",
        "HABITPULSE_DATABASE_URL",
        "HABITPULSE_LOG_LEVEL",
        "HABITPULSE_STATUS_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig(data_dir=tmp_path)

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DEV_MODE is True
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'habitpulse.db'}"
    assert config.LOG_LEVEL == "INFO"
    assert config.STATUS_WORKERS == 0


def test_data_dir_from_environment(tmp_path, monkeypatch):
    target = tmp_path / "nested" / "data"
    monkeypatch.setenv("HABITPULSE_DATA_DIR", str(target))

    config = DevConfig()

    assert config.DATA_DIR == target.resolve()
    assert target.is_dir()
    assert config.DEBUG is True


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITPULSE_DEV_MODE", "off")
    monkeypatch.setenv("HABITPULSE_DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("HABITPULSE_LOG_LEVEL", "debug")
    monkeypatch.setenv("HABITPULSE_STATUS_WORKERS", "4")

    config = BaseConfig(data_dir=tmp_path)

    assert config.DEV_MODE is False
    assert config.DATABASE_URL == "sqlite:///:memory:"
    assert config.LOG_LEVEL == "DEBUG"
    assert config.STATUS_WORKERS == 4


@pytest.mark.parametrize("value", ["-1", "many"])
def test_invalid_worker_count(tmp_path, monkeypatch, value):
    monkeypatch.setenv("HABITPULSE_STATUS_WORKERS", value)

    with pytest.raises(ValueError, match="HABITPULSE_STATUS_WORKERS"):
        BaseConfig(data_dir=tmp_path)


def test_sqlite_engine_options(tmp_path, monkeypatch):
    assert BaseConfig(data_dir=tmp_path).sqlalchemy_engine_options()["connect_args"] == {
        "check_same_thread": False
    }

    monkeypatch.setenv("HABITPULSE_DATABASE_URL", "postgresql://localhost/habits")
    assert "connect_args" not in BaseConfig(data_dir=tmp_path).sqlalchemy_engine_options()


def test_test_config_ignores_database_url(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITPULSE_DATABASE_URL", "postgresql://localhost/habits")

    config = TestConfig(tmp_path)

    assert config.DATABASE_URL.startswith("sqlite:///")
    assert config.DEV_MODE is False
    assert config.TESTING is True


def test_app_context_wires_services(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITPULSE_STATUS_WORKERS", "2")
    app = create_app_context(TestConfig(tmp_path))
    try:
        assert app.status_service.habit_repository is app.habit_repo
        assert app.completion_data_service.execution is app.execution
        assert app.execution.max_workers == 2
        assert app.habit_repo.list_all() == []
    finally:
        app.dispose()
