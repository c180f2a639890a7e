"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""

    # Channels
    log_channel: str = ""
    main_channel: str = ""
    arma_channel: str = ""
    bms_channel: str = ""

    # Roles (Slack user group names or handles)
    arma_player_role: str = ""
    bms_player_role: str = ""
    admin_roles: str = ""  # Comma-separated
    allowed_groups: str = ""  # Comma-separated

    # Feeds
    calendar_feed_url: str = (
        "http://forums.unitedoperations.net/index.php/rss/calendar/1-community-calendar/"
    )
    server_status_url: str = "http://www.unitedoperations.net/tools/uosim/"
    reminder_intervals: str = "1 day,1 hour"  # Comma-separated, ordered
    num_player_for_alert: int = 10

    # Routines (seconds)
    calendar_refresh_interval: float = 30 * 60
    reminder_interval: float = 60
    mission_interval: float = 5 * 60
    http_timeout: float = 15.0
    enable_routines: bool = True

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080

    @property
    def admin_role_names(self) -> list[str]:
        return _split(self.admin_roles)

    @property
    def allowed_group_names(self) -> list[str]:
        return _split(self.allowed_groups)

    @property
    def reminder_labels(self) -> list[str]:
        return _split(self.reminder_intervals)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
