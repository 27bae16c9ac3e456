"""
Test settings loading from the environment and from .env files.

Already-set environment variables take precedence over .env values, and the
cached settings can be reset between tests.
"""

import os

import pytest
from dotenv import load_dotenv
from pydantic import ValidationError

from hospitalflow.core import config
from hospitalflow.core.config import (
    ClaimFeedSettings,
    HospitalSettings,
    Settings,
    _load_env_file_if_available,
    get_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_hospital_fees_from_environment(monkeypatch):
    monkeypatch.setenv("HOSPITAL_GENERAL_MEDICINE_FEE", "6000")
    monkeypatch.setenv("HOSPITAL_STAFF_DISCOUNT", "25")

    schedule = HospitalSettings().fee_schedule()
    assert schedule.general_medicine_fee == 6000
    assert schedule.staff_discount == 25


def test_negative_fee_rejected(monkeypatch):
    monkeypatch.setenv("HOSPITAL_PEDIATRICS_FEE", "-1")
    with pytest.raises(ValidationError):
        HospitalSettings()


def test_claim_feed_settings_from_environment(monkeypatch):
    monkeypatch.setenv("HMO_POLL_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("HMO_REFRESH_ENABLED", "true")

    settings = ClaimFeedSettings()
    assert settings.poll_interval_seconds == 2.5
    assert settings.refresh_enabled is True


def test_poll_interval_bounds():
    with pytest.raises(ValidationError):
        ClaimFeedSettings(poll_interval_seconds=0)


def test_app_env_validated(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Staging")
    assert Settings().app_env == "staging"

    monkeypatch.setenv("APP_ENV", "qa")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached_until_reset(monkeypatch):
    monkeypatch.setenv("APP_NAME", "First")
    first = get_settings()
    monkeypatch.setenv("APP_NAME", "Second")
    assert get_settings() is first

    reset_settings()
    assert get_settings().app_name == "Second"


def test_already_set_env_vars_take_precedence(monkeypatch, tmp_path):
    """Values from .env never override the process environment."""
    monkeypatch.setenv("HOSPITAL_NAME", "Already Set Hospital")
    env_file = tmp_path / ".env"
    env_file.write_text("HOSPITAL_NAME=From Env File\n")

    load_dotenv(dotenv_path=str(env_file), override=False)
    assert os.getenv("HOSPITAL_NAME") == "Already Set Hospital"


def test_env_file_found_in_parent_directory(monkeypatch, tmp_path):
    monkeypatch.delenv("HOSPITAL_SPECIALIST_FEE", raising=False)
    (tmp_path / ".env").write_text("HOSPITAL_SPECIALIST_FEE=12000\n")
    nested = tmp_path / "deploy" / "bin"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    _load_env_file_if_available()
    try:
        assert os.getenv("HOSPITAL_SPECIALIST_FEE") == "12000"
        assert HospitalSettings().specialist_fee == 12000
    finally:
        os.environ.pop("HOSPITAL_SPECIALIST_FEE", None)


def test_no_env_files_no_crash(monkeypatch, tmp_path):
    """Missing .env files are not an error."""
    monkeypatch.chdir(tmp_path)
    _load_env_file_if_available()
    assert config._settings is None
