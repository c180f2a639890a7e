"""Shared test fixtures."""

import os

# Routines do network I/O; the HTTP app runs without them under test
os.environ["ENABLE_ROUTINES"] = "false"

import pytest
from fastapi.testclient import TestClient

from uo_bot.app import app
from uo_bot.config import Settings, get_settings

get_settings.cache_clear()


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def settings() -> Settings:
    """Settings with every channel and role filled in."""
    return Settings(
        _env_file=None,
        slack_bot_token="xoxb-test",
        slack_signing_secret="test_signing_secret_1234",
        log_channel="C_LOG",
        main_channel="C_MAIN",
        arma_channel="C_ARMA",
        bms_channel="C_BMS",
        arma_player_role="ArmA Players",
        bms_player_role="BMS Players",
        admin_roles="Admins, Moderators",
        allowed_groups="ArmA Players,BMS Players",
        reminder_intervals="1 day,1 hour",
        num_player_for_alert=10,
        enable_routines=False,
    )
