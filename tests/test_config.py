"""Tests for settings parsing."""

from uo_bot.config import Settings


def test_comma_separated_lists(monkeypatch):
    monkeypatch.setenv("ADMIN_ROLES", "Admins, Moderators ,")
    monkeypatch.setenv("ALLOWED_GROUPS", "ArmA Players,BMS Players")
    monkeypatch.setenv("REMINDER_INTERVALS", "2 days, 1 day,1 hour")

    settings = Settings(_env_file=None)

    assert settings.admin_role_names == ["Admins", "Moderators"]
    assert settings.allowed_group_names == ["ArmA Players", "BMS Players"]
    assert settings.reminder_labels == ["2 days", "1 day", "1 hour"]


def test_player_threshold_from_env(monkeypatch):
    monkeypatch.setenv("NUM_PLAYER_FOR_ALERT", "15")
    assert Settings(_env_file=None).num_player_for_alert == 15


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENABLE_ROUTINES", raising=False)
    settings = Settings(_env_file=None)
    assert settings.reminder_labels == ["1 day", "1 hour"]
    assert settings.enable_routines is True
    assert settings.reminder_interval == 60
    assert settings.mission_interval == 300
