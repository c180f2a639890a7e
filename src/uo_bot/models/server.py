"""Game server status model."""

from pydantic import BaseModel, computed_field

NO_MISSION = "None"


class ServerStatus(BaseModel):
    """Last observed state of the live game server."""

    mission_name: str
    description: str = "Unknown"
    players: str = "0/64"  # Raw "current/max" string from the status page
    island: str = "Unknown"
    author: str = "Unknown"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def player_count(self) -> int:
        """Current player count parsed from the ``players`` string (0 if unparsable)."""
        current = self.players.split("/", 1)[0].strip()
        return int(current) if current.isdigit() else 0

    @property
    def is_sentinel(self) -> bool:
        return self.mission_name == NO_MISSION

    @classmethod
    def sentinel(cls) -> "ServerStatus":
        """The well-known "no mission" placeholder used when a fetch finds nothing."""
        return cls(mission_name=NO_MISSION)
