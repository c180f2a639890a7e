"""Tests for the ServerStatus model."""

from uo_bot.models.server import NO_MISSION, ServerStatus


def test_player_count_parsed_from_players_string():
    status = ServerStatus(mission_name="Alpha", players="23/64")
    assert status.player_count == 23


def test_player_count_tolerates_whitespace():
    assert ServerStatus(mission_name="Alpha", players=" 7 / 64").player_count == 7


def test_unparsable_player_count_is_zero():
    assert ServerStatus(mission_name="Alpha", players="unknown").player_count == 0


def test_sentinel_defaults():
    sentinel = ServerStatus.sentinel()
    assert sentinel.mission_name == NO_MISSION
    assert sentinel.is_sentinel
    assert sentinel.player_count == 0
    assert sentinel.description == "Unknown"


def test_player_count_serialized():
    """player_count is included when the status is dumped (e.g. for logging)."""
    dumped = ServerStatus(mission_name="Alpha", players="5/64").model_dump()
    assert dumped["player_count"] == 5
